# models/complainant.py

from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class Complainant(BaseModel):
    id: str
    full_name: str
    phone: str
    national_id: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None
