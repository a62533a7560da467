# services/complaint_workflow.py

"""
Complaint submission, assignment and internal notes.
Status changes live in services.status_transitions.
"""

from typing import Callable, Optional

from core.errors import Conflict, Forbidden, NotFound, RepositoryError, ValidationFailed
from core.locks import KeyedLock, complaint_locks
from core.logging_config import logger
from models.actor import Actor
from models.complainant import Complainant
from models.complaint import Complaint, ComplaintSubmit
from models.complaint_log import ComplaintLogRead
from models.enums import ComplaintStatus, LogAction, Role
from services.access_filter import require_complaint_access


# ============================================================
# SUBMIT (public)
# ============================================================
def find_or_create_complainant(repository, payload: ComplaintSubmit) -> Complainant:
    complainant = repository.find_complainant(payload.phone, payload.national_id)
    if complainant:
        return complainant

    complainant = repository.create_complainant({
        "full_name": payload.full_name.strip(),
        "phone": payload.phone,
        "national_id": payload.national_id,
        "email": payload.email,
    })
    logger.info(f"Created complainant {complainant.id}")
    return complainant


def submit_complaint(
    repository,
    payload: ComplaintSubmit,
    actor: Optional[Actor] = None,
    notifier: Optional[Callable[[Complaint, Complainant], None]] = None,
) -> Complaint:
    complaint_type = repository.get_complaint_type(payload.type_id)
    if complaint_type is None or not complaint_type.is_active:
        raise ValidationFailed("Unknown complaint type")

    complainant = find_or_create_complainant(repository, payload)

    complaint = repository.create_complaint({
        "complainant_id": complainant.id,
        "type_id": payload.type_id,
        "title": payload.title.strip(),
        "description": payload.description.strip(),
        "location": payload.location,
        "status": ComplaintStatus.NEW.value,
    })

    repository.insert_log({
        "complaint_id": complaint.id,
        "user_id": actor.id if actor and actor.is_staff else None,
        "action": LogAction.CREATED.value,
        "new_status": ComplaintStatus.NEW.value,
        "notes": "Complaint submitted",
    })

    logger.info(f"Complaint {complaint.id} submitted by complainant {complainant.id}")

    if notifier is not None:
        try:
            notifier(complaint, complainant)
        except Exception as e:
            logger.error(f"Could not dispatch new complaint notification for {complaint.id}: {e}")

    return complaint


# ============================================================
# ASSIGN (admin only)
# ============================================================
def assign_complaint(
    repository,
    actor: Actor,
    complaint_id: str,
    employee_id: str,
    locks: Optional[KeyedLock] = None,
) -> Complaint:
    if actor.role != Role.ADMIN:
        raise Forbidden("Only admins can assign complaints")

    employee = repository.get_staff_user(employee_id)
    if employee is None or employee.role != Role.EMPLOYEE.value or not employee.is_active:
        raise NotFound("Employee not found")

    with (locks or complaint_locks).hold(complaint_id):
        complaint = repository.get_complaint(complaint_id)
        if complaint is None:
            raise NotFound()

        updated = repository.update_complaint(
            complaint_id,
            {"assigned_to_id": employee.id},
            expected={"assigned_to_id": complaint.assigned_to_id},
        )
        if updated is None:
            raise Conflict()

        try:
            repository.insert_log({
                "complaint_id": complaint_id,
                "user_id": actor.id,
                "action": LogAction.ASSIGNED.value,
                "notes": f"Complaint assigned to employee: {employee.full_name}",
            })
        except RepositoryError:
            _revert_assignment(repository, complaint)
            raise

    logger.info(f"Admin {actor.id} assigned complaint {complaint_id} to {employee.id}")
    return updated


def _revert_assignment(repository, original: Complaint):
    try:
        repository.update_complaint(original.id, {"assigned_to_id": original.assigned_to_id})
        logger.warning(f"Reverted assignment of complaint {original.id} after log write failure")
    except RepositoryError:
        logger.error(
            f"Could not revert assignment of complaint {original.id} after log write failure"
        )


# ============================================================
# INTERNAL NOTE (staff with access to the complaint)
# ============================================================
def add_internal_note(repository, actor: Actor, complaint_id: str, notes: str) -> ComplaintLogRead:
    if not actor.is_staff:
        raise Forbidden("Only staff can add internal notes")

    text = (notes or "").strip()
    if not text:
        raise ValidationFailed("Note text is required")

    require_complaint_access(repository, actor, complaint_id)

    entry = repository.insert_log({
        "complaint_id": complaint_id,
        "user_id": actor.id,
        "action": LogAction.INTERNAL_NOTE.value,
        "notes": text,
    })

    logger.info(f"{actor.role} {actor.id} added a note to complaint {complaint_id}")
    return entry
