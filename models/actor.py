# models/actor.py

from typing import Optional
from pydantic import BaseModel

from models.enums import Role


class Actor(BaseModel):
    """
    The authenticated identity behind a request.
    Built per request from a verified token; never persisted.

    For CITIZEN actors `id` and `complainant_id` are the complainant's id.
    For staff actors `complainant_id` is None.
    """
    id: str
    role: Role
    complainant_id: Optional[str] = None

    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    @property
    def is_staff(self) -> bool:
        return self.role in (Role.ADMIN, Role.EMPLOYEE)
