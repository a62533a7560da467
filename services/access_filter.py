# services/access_filter.py

"""
Role-scoped complaint visibility.

Every complaint read goes through here:

- ADMIN sees everything; client filters apply as-is.
- EMPLOYEE is hard-restricted to complaints assigned to them.
- CITIZEN is hard-restricted to complaints they filed.

The role restriction lives in `ComplaintQuery.restrictions`, separate from
client filters, and the repository ANDs both. A client filter can narrow
the result but never widen it past the restriction.
"""

from dataclasses import dataclass, field
from math import ceil
from typing import List, Optional, Tuple

from core.config import settings
from core.errors import Forbidden, NotFound
from models.actor import Actor
from models.complaint import (
    Complaint,
    ComplaintDetail,
    ComplaintFilters,
    ComplaintPage,
    Pagination,
)
from models.enums import LogAction, Role


# ============================================================
# Query predicate handed to the repository
# ============================================================
@dataclass
class ComplaintQuery:
    restrictions: List[Tuple[str, str]] = field(default_factory=list)
    filters: List[Tuple[str, str]] = field(default_factory=list)
    search: Optional[str] = None
    page: int = 1
    page_size: int = 10
    order_by: str = "created_at"
    descending: bool = True

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def equality_predicates(self) -> List[Tuple[str, str]]:
        """All column == value pairs; every one of them must hold."""
        return list(self.restrictions) + list(self.filters)


def role_restrictions(actor: Actor) -> List[Tuple[str, str]]:
    if actor.role == Role.ADMIN:
        return []
    elif actor.role == Role.EMPLOYEE:
        return [("assigned_to_id", actor.id)]
    elif actor.role == Role.CITIZEN:
        return [("complainant_id", actor.complainant_id)]
    raise ValueError(f"Unhandled role: {actor.role}")


def clamp_page(page: Optional[int]) -> int:
    return max(1, page or 1)


def clamp_page_size(page_size: Optional[int]) -> int:
    size = page_size or settings.DEFAULT_PAGE_SIZE
    return max(1, min(size, settings.MAX_PAGE_SIZE))


def build_complaint_query(actor: Actor, filters: Optional[ComplaintFilters] = None) -> ComplaintQuery:
    filters = filters or ComplaintFilters()

    client_filters = []
    if filters.status:
        client_filters.append(("status", filters.status.value))
    if filters.type_id:
        client_filters.append(("type_id", filters.type_id))

    search = filters.search.strip() if filters.search else None

    return ComplaintQuery(
        restrictions=role_restrictions(actor),
        filters=client_filters,
        search=search or None,
        page=clamp_page(filters.page),
        page_size=clamp_page_size(filters.page_size),
    )


# ============================================================
# Read operations
# ============================================================
def list_complaints(repository, actor: Actor, filters: Optional[ComplaintFilters] = None) -> ComplaintPage:
    query = build_complaint_query(actor, filters)
    complaints, total = repository.list_complaints(query)

    return ComplaintPage(
        complaints=complaints,
        pagination=Pagination(
            page=query.page,
            page_size=query.page_size,
            total=total,
            pages=ceil(total / query.page_size),
        ),
    )


def can_access_complaint(actor: Actor, complaint: Complaint) -> bool:
    if actor.role == Role.ADMIN:
        return True
    elif actor.role == Role.EMPLOYEE:
        return complaint.assigned_to_id == actor.id
    elif actor.role == Role.CITIZEN:
        return complaint.complainant_id == actor.complainant_id
    raise ValueError(f"Unhandled role: {actor.role}")


def require_complaint_access(repository, actor: Actor, complaint_id: str) -> Complaint:
    """
    Fetch a complaint and check the actor may see it.
    A missing complaint is NotFound for every role; an existing one the
    actor may not see is Forbidden.
    """
    complaint = repository.get_complaint(complaint_id)
    if complaint is None:
        raise NotFound()

    if not can_access_complaint(actor, complaint):
        raise Forbidden()

    return complaint


def visible_log_actions_excluded(actor: Actor) -> List[LogAction]:
    # Internal notes are staff-only
    if actor.role == Role.CITIZEN:
        return [LogAction.INTERNAL_NOTE]
    return []


def get_complaint_for_actor(repository, actor: Actor, complaint_id: str) -> ComplaintDetail:
    complaint = require_complaint_access(repository, actor, complaint_id)
    logs = repository.list_logs(complaint_id, exclude_actions=visible_log_actions_excluded(actor))
    return ComplaintDetail(**complaint.model_dump(), logs=logs)


def list_complaint_logs(repository, actor: Actor, complaint_id: str):
    require_complaint_access(repository, actor, complaint_id)
    return repository.list_logs(complaint_id, exclude_actions=visible_log_actions_excluded(actor))
