# routers/complaints.py

from functools import partial
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from core.config import settings
from core.notifications import notify_new_complaint, notify_status_change
from core.permission_helpers import requires_permission
from core.rate_limiter import rate_limited
from dependencies.auth import get_current_actor, get_optional_actor
from models.actor import Actor
from models.complaint import (
    Complaint,
    ComplaintAssign,
    ComplaintDetail,
    ComplaintFilters,
    ComplaintNoteCreate,
    ComplaintPage,
    ComplaintStatusUpdate,
    ComplaintSubmit,
    ComplaintSubmitted,
)
from models.complaint_log import ComplaintLogRead
from models.enums import ComplaintStatus
from services.access_filter import (
    get_complaint_for_actor,
    list_complaint_logs,
    list_complaints,
)
from services.complaint_repository import get_complaint_repository
from services.complaint_workflow import (
    add_internal_note,
    assign_complaint,
    submit_complaint,
)
from services.status_transitions import StatusTransitionRecorder

router = APIRouter(
    prefix="/complaints",
    tags=["Complaints"],
)


# -----------------------------------------------------
# SUBMIT COMPLAINT (public)
# -----------------------------------------------------
@router.post(
    "/submit",
    response_model=ComplaintSubmitted,
    status_code=201,
    dependencies=[
        Depends(rate_limited("submit", settings.SUBMIT_RATE_LIMIT, settings.SUBMIT_RATE_WINDOW_SECONDS))
    ],
)
def submit(
    payload: ComplaintSubmit,
    background_tasks: BackgroundTasks,
    actor: Optional[Actor] = Depends(get_optional_actor),
    repository=Depends(get_complaint_repository),
):
    """
    Submit a new complaint.

    The complainant is matched by phone or national id, or created.
    Administrators are notified in the background.
    """
    return submit_complaint(
        repository,
        payload,
        actor=actor,
        notifier=partial(background_tasks.add_task, notify_new_complaint),
    )


# -----------------------------------------------------
# LIST COMPLAINTS (role-scoped)
# -----------------------------------------------------
@router.get("", summary="List Complaints", response_model=ComplaintPage)
def get_complaints(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    status: Optional[ComplaintStatus] = Query(None, description="Filter by status"),
    type_id: Optional[str] = Query(None, description="Filter by complaint type"),
    search: Optional[str] = Query(None, description="Search title, description and complainant name"),
    actor: Actor = Depends(requires_permission("complaints:read")),
    repository=Depends(get_complaint_repository),
):
    """
    - Admins: all complaints
    - Employees: complaints assigned to them
    - Citizens: complaints they filed
    """
    filters = ComplaintFilters(
        status=status,
        type_id=type_id,
        search=search,
        page=page,
        page_size=page_size,
    )
    return list_complaints(repository, actor, filters)


# -----------------------------------------------------
# GET COMPLAINT
# -----------------------------------------------------
@router.get("/{complaint_id}", response_model=ComplaintDetail)
def get_complaint(
    complaint_id: str,
    actor: Actor = Depends(get_current_actor),
    repository=Depends(get_complaint_repository),
):
    return get_complaint_for_actor(repository, actor, complaint_id)


@router.get("/{complaint_id}/logs", response_model=List[ComplaintLogRead])
def get_complaint_logs(
    complaint_id: str,
    actor: Actor = Depends(get_current_actor),
    repository=Depends(get_complaint_repository),
):
    """Audit trail, newest first."""
    return list_complaint_logs(repository, actor, complaint_id)


# -----------------------------------------------------
# UPDATE STATUS (employee / admin)
# -----------------------------------------------------
@router.patch("/{complaint_id}/status", response_model=Complaint)
def update_status(
    complaint_id: str,
    payload: ComplaintStatusUpdate,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(requires_permission("complaints:status")),
    repository=Depends(get_complaint_repository),
):
    """
    Change a complaint's status and record it in the audit trail.
    An employee updating an unassigned complaint claims it.
    """
    recorder = StatusTransitionRecorder(
        repository,
        notifier=partial(background_tasks.add_task, notify_status_change, repository),
    )
    return recorder.change_status(actor, complaint_id, payload.status, payload.notes)


# -----------------------------------------------------
# ASSIGN (admin)
# -----------------------------------------------------
@router.patch("/{complaint_id}/assign", response_model=Complaint)
def assign(
    complaint_id: str,
    payload: ComplaintAssign,
    actor: Actor = Depends(requires_permission("complaints:assign")),
    repository=Depends(get_complaint_repository),
):
    return assign_complaint(repository, actor, complaint_id, payload.assigned_to_id)


# -----------------------------------------------------
# INTERNAL NOTE (employee / admin)
# -----------------------------------------------------
@router.post("/{complaint_id}/notes", response_model=ComplaintLogRead, status_code=201)
def add_note(
    complaint_id: str,
    payload: ComplaintNoteCreate,
    actor: Actor = Depends(requires_permission("complaints:notes")),
    repository=Depends(get_complaint_repository),
):
    return add_internal_note(repository, actor, complaint_id, payload.notes)
