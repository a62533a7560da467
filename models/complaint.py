# models/complaint.py

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from models.enums import ComplaintStatus
from models.complaint_log import ComplaintLogRead


# -------------------------------------------------------------------
# Timestamp helper
# Supabase returns "...Z" strings; normalize to an explicit UTC offset.
# -------------------------------------------------------------------
def _normalize_timestamp(value):
    if isinstance(value, str) and value.endswith("Z"):
        return value[:-1] + "+00:00"
    return value


# -------------------------------------------------------------------
# Embedded relations (PostgREST resource embedding)
# -------------------------------------------------------------------
class ComplaintTypeSummary(BaseModel):
    id: Optional[str] = None
    name: str


class ComplainantSummary(BaseModel):
    id: Optional[str] = None
    full_name: str
    phone: Optional[str] = None
    email: Optional[str] = None


class StaffSummary(BaseModel):
    id: Optional[str] = None
    full_name: str
    email: Optional[str] = None


# -------------------------------------------------------------------
# READ MODEL (Supabase → API response)
# -------------------------------------------------------------------
class Complaint(BaseModel):
    id: str
    complainant_id: str
    type_id: str
    assigned_to_id: Optional[str] = None
    status: ComplaintStatus
    title: str
    description: str
    location: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    type: Optional[ComplaintTypeSummary] = None
    complainant: Optional[ComplainantSummary] = None
    assigned_to: Optional[StaffSummary] = None

    model_config = {"from_attributes": True}

    @field_validator("created_at", "updated_at", "resolved_at", mode="before")
    def normalize_timestamps(cls, v):
        return _normalize_timestamp(v)


class ComplaintDetail(Complaint):
    """Single complaint with its audit trail (newest first)."""
    logs: List[ComplaintLogRead] = []


# -------------------------------------------------------------------
# SUBMISSION (public complaint form)
# -------------------------------------------------------------------
class ComplaintSubmit(BaseModel):
    full_name: str = Field(..., min_length=2, description="Complainant full name")
    phone: str = Field(..., min_length=7, max_length=20, pattern=r"^\+?[0-9]+$")
    national_id: str = Field(..., pattern=r"^[0-9]{14}$", description="14-digit national id")
    email: Optional[str] = Field(None, description="Optional email for status updates")
    type_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=5)
    description: str = Field(..., min_length=10)
    location: Optional[str] = None

    @field_validator("email", "location", mode="before")
    def empty_to_none(cls, v):
        if isinstance(v, str) and v.strip() == "":
            return None
        return v


class ComplaintSubmitted(BaseModel):
    id: str
    title: str
    status: ComplaintStatus
    created_at: datetime

    @field_validator("created_at", mode="before")
    def normalize_created_at(cls, v):
        return _normalize_timestamp(v)


# -------------------------------------------------------------------
# STAFF ACTIONS
# -------------------------------------------------------------------
class ComplaintStatusUpdate(BaseModel):
    status: ComplaintStatus
    notes: Optional[str] = None


class ComplaintAssign(BaseModel):
    assigned_to_id: str = Field(..., min_length=1)


class ComplaintNoteCreate(BaseModel):
    notes: str = Field(..., min_length=1)


# -------------------------------------------------------------------
# LISTING
# -------------------------------------------------------------------
class ComplaintFilters(BaseModel):
    """Client-supplied criteria. Role restrictions are applied on top."""
    status: Optional[ComplaintStatus] = None
    type_id: Optional[str] = None
    search: Optional[str] = None
    page: int = 1
    page_size: int = 10


class Pagination(BaseModel):
    page: int
    page_size: int
    total: int
    pages: int


class ComplaintPage(BaseModel):
    complaints: List[Complaint]
    pagination: Pagination
