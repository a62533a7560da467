# models/user.py

from typing import Optional
from datetime import datetime
from pydantic import BaseModel


# ===============================================================
# STAFF USERS (public.users, linked to Supabase Auth)
# ===============================================================

class StaffUser(BaseModel):
    """
    Row of the `users` table. `role` stays a plain string here because
    the identity resolver decides what to do with unknown values.
    """
    id: str
    email: str
    full_name: str
    role: str
    is_active: bool = True
    phone: Optional[str] = None
    auth_user_id: Optional[str] = None
    created_at: Optional[datetime] = None


class StaffUserActiveUpdate(BaseModel):
    is_active: bool
