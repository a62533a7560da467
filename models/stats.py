# models/stats.py

from typing import List
from datetime import datetime
from pydantic import BaseModel

from models.enums import ComplaintStatus


class StatsOverview(BaseModel):
    total_complaints: int
    new_complaints: int
    in_progress_complaints: int
    resolved_complaints: int
    complaints_this_month: int
    complaints_last_month: int
    growth_percentage: float


class TypeCount(BaseModel):
    type: str
    count: int


class StatusCount(BaseModel):
    status: ComplaintStatus
    count: int


class RecentComplaint(BaseModel):
    id: str
    title: str
    type: str
    complainant: str
    status: ComplaintStatus
    created_at: datetime


class DashboardStats(BaseModel):
    overview: StatsOverview
    complaints_by_type: List[TypeCount]
    complaints_by_status: List[StatusCount]
    recent_complaints: List[RecentComplaint]


class MonthlyCount(BaseModel):
    month: int
    count: int
