# models/complaint_log.py

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, field_validator

from models.enums import ComplaintStatus, LogAction


class LogAuthor(BaseModel):
    full_name: str


class ComplaintLogRead(BaseModel):
    """One entry of the append-only audit trail. Never updated or deleted."""
    id: str
    complaint_id: str
    user_id: Optional[str] = None       # null for anonymous submissions
    action: LogAction
    old_status: Optional[ComplaintStatus] = None
    new_status: Optional[ComplaintStatus] = None
    notes: Optional[str] = None
    created_at: datetime

    user: Optional[LogAuthor] = None

    @field_validator("created_at", mode="before")
    def normalize_created_at(cls, v):
        if isinstance(v, str) and v.endswith("Z"):
            return v[:-1] + "+00:00"
        return v
