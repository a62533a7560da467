# models/complaint_type.py

from typing import Optional
from pydantic import BaseModel, Field


class ComplaintTypeBase(BaseModel):
    name: str = Field(..., min_length=2)
    description: Optional[str] = None
    icon: Optional[str] = None


class ComplaintTypeCreate(ComplaintTypeBase):
    pass


class ComplaintTypeUpdate(BaseModel):
    description: Optional[str] = None
    icon: Optional[str] = None
    is_active: Optional[bool] = None


class ComplaintTypeRead(ComplaintTypeBase):
    id: str
    is_active: bool = True
