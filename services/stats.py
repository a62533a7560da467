# services/stats.py

from collections import Counter
from datetime import datetime, timezone
from typing import List, Optional

from core.errors import Forbidden
from models.actor import Actor
from models.complaint import ComplaintFilters
from models.enums import ComplaintStatus, Role
from models.stats import (
    DashboardStats,
    MonthlyCount,
    RecentComplaint,
    StatsOverview,
    StatusCount,
    TypeCount,
)
from services.access_filter import ComplaintQuery, build_complaint_query

IN_PROGRESS_STATUSES = {ComplaintStatus.UNDER_REVIEW.value, ComplaintStatus.IN_PROGRESS.value}
RECENT_LIMIT = 5
UNKNOWN_TYPE = "Unspecified"


def _parse_created_at(value) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def month_start(year: int, month: int) -> datetime:
    # month may run one past either end of the year
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return datetime(year, month, 1, tzinfo=timezone.utc)


def growth_percentage(this_month: int, last_month: int) -> float:
    if last_month == 0:
        return 100.0 if this_month > 0 else 0.0
    return round((this_month - last_month) / last_month * 100, 2)


def stats_query(actor: Actor) -> ComplaintQuery:
    if actor.role == Role.CITIZEN:
        raise Forbidden("Statistics are only available to staff")
    return build_complaint_query(actor)


def load_facets(repository, query: ComplaintQuery) -> List[dict]:
    """
    Every facet row matching `query`, fetched page by page.

    The server may return fewer rows than asked for (PostgREST max-rows),
    so paging only stops on an empty page.
    """
    rows: List[dict] = []
    while True:
        page = repository.list_complaint_facets(query, offset=len(rows))
        if not page:
            return rows
        rows.extend(page)


# ============================================================
# DASHBOARD
# ============================================================
def get_dashboard_stats(repository, actor: Actor, now: Optional[datetime] = None) -> DashboardStats:
    now = now or datetime.now(timezone.utc)
    query = stats_query(actor)
    rows = load_facets(repository, query)

    this_month_start = month_start(now.year, now.month)
    last_month_start = month_start(now.year, now.month - 1)

    statuses = Counter(row["status"] for row in rows)
    this_month = 0
    last_month = 0
    for row in rows:
        created_at = _parse_created_at(row["created_at"])
        if created_at >= this_month_start:
            this_month += 1
        elif created_at >= last_month_start:
            last_month += 1

    type_names = {t.id: t.name for t in repository.list_complaint_types(active_only=False)}
    by_type = Counter(type_names.get(row["type_id"], UNKNOWN_TYPE) for row in rows)

    recent, _ = repository.list_complaints(
        build_complaint_query(actor, ComplaintFilters(page=1, page_size=RECENT_LIMIT))
    )

    return DashboardStats(
        overview=StatsOverview(
            total_complaints=len(rows),
            new_complaints=statuses.get(ComplaintStatus.NEW.value, 0),
            in_progress_complaints=sum(statuses.get(s, 0) for s in IN_PROGRESS_STATUSES),
            resolved_complaints=statuses.get(ComplaintStatus.RESOLVED.value, 0),
            complaints_this_month=this_month,
            complaints_last_month=last_month,
            growth_percentage=growth_percentage(this_month, last_month),
        ),
        complaints_by_type=[
            TypeCount(type=name, count=count) for name, count in by_type.most_common()
        ],
        complaints_by_status=[
            StatusCount(status=status, count=count) for status, count in statuses.most_common()
        ],
        recent_complaints=[
            RecentComplaint(
                id=c.id,
                title=c.title,
                type=c.type.name if c.type else UNKNOWN_TYPE,
                complainant=c.complainant.full_name if c.complainant else "",
                status=c.status,
                created_at=c.created_at,
            )
            for c in recent
        ],
    )


# ============================================================
# MONTHLY (admin only)
# ============================================================
def get_monthly_stats(repository, actor: Actor, year: int) -> List[MonthlyCount]:
    if actor.role != Role.ADMIN:
        raise Forbidden("Monthly statistics are only available to admins")

    counts = Counter()
    for row in load_facets(repository, stats_query(actor)):
        created_at = _parse_created_at(row["created_at"])
        if created_at.year == year:
            counts[created_at.month] += 1

    return [MonthlyCount(month=m, count=counts.get(m, 0)) for m in range(1, 13)]
