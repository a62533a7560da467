# routers/stats.py

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from dependencies.auth import requires_role
from models.actor import Actor
from models.enums import Role
from models.stats import DashboardStats, MonthlyCount
from services.complaint_repository import get_complaint_repository
from services.stats import get_dashboard_stats, get_monthly_stats

router = APIRouter(
    prefix="/stats",
    tags=["Statistics"],
)


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(
    actor: Actor = Depends(requires_role(Role.ADMIN, Role.EMPLOYEE)),
    repository=Depends(get_complaint_repository),
):
    """Employees only see figures for complaints assigned to them."""
    return get_dashboard_stats(repository, actor)


@router.get("/monthly", response_model=List[MonthlyCount])
def monthly(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    actor: Actor = Depends(requires_role(Role.ADMIN)),
    repository=Depends(get_complaint_repository),
):
    year = year or datetime.now(timezone.utc).year
    return get_monthly_stats(repository, actor, year)
