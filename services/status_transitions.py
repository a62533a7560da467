# services/status_transitions.py

"""
Status changes for complaints.

`StatusTransitionRecorder.change_status` is the single write path for a
complaint's status. Under the complaint's lock it reads the row, checks
the actor, writes the new status with a conditional update and appends a
STATUS_CHANGED log entry. If the log write fails the row is put back.

Any status may follow any other status. There is no transition graph.
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from core.errors import Conflict, Forbidden, NotFound, RepositoryError, ValidationFailed
from core.locks import KeyedLock, complaint_locks
from core.logging_config import logger
from models.actor import Actor
from models.complaint import Complaint
from models.enums import ComplaintStatus, LogAction, Role

# notifier(complaint, old_status, new_status, notes)
Notifier = Callable[[Complaint, ComplaintStatus, ComplaintStatus, Optional[str]], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_status(value) -> ComplaintStatus:
    try:
        return ComplaintStatus(str(value))
    except ValueError:
        raise ValidationFailed(
            f"Invalid status. Must be one of: {', '.join(ComplaintStatus.list())}"
        )


def default_status_note(old_status: ComplaintStatus, new_status: ComplaintStatus) -> str:
    return f"Status changed from {old_status} to {new_status}"


class StatusTransitionRecorder:
    def __init__(
        self,
        repository,
        notifier: Optional[Notifier] = None,
        locks: Optional[KeyedLock] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.notifier = notifier
        self.locks = locks or complaint_locks
        self.clock = clock

    def change_status(
        self,
        actor: Actor,
        complaint_id: str,
        status,
        notes: Optional[str] = None,
    ) -> Complaint:
        new_status = parse_status(status)

        with self.locks.hold(complaint_id):
            complaint = self.repository.get_complaint(complaint_id)
            if complaint is None:
                raise NotFound()

            auto_claim = self._check_actor(actor, complaint)
            old_status = complaint.status

            changes = {"status": new_status.value}
            if new_status == ComplaintStatus.RESOLVED and complaint.resolved_at is None:
                changes["resolved_at"] = self.clock().isoformat()
            if auto_claim:
                changes["assigned_to_id"] = actor.id

            updated = self.repository.update_complaint(
                complaint_id,
                changes,
                expected={
                    "status": old_status.value,
                    "assigned_to_id": complaint.assigned_to_id,
                },
            )
            if updated is None:
                logger.warning(f"Complaint {complaint_id} changed during status update by {actor.id}")
                raise Conflict()

            entry = {
                "complaint_id": complaint_id,
                "user_id": actor.id,
                "action": LogAction.STATUS_CHANGED.value,
                "old_status": old_status.value,
                "new_status": new_status.value,
                "notes": notes.strip() if notes and notes.strip() else default_status_note(old_status, new_status),
            }
            try:
                self.repository.insert_log(entry)
            except RepositoryError:
                self._revert(complaint, updated)
                raise

        logger.info(
            f"{actor.role} {actor.id} changed complaint {complaint_id} "
            f"from {old_status} to {new_status}"
            + (" (auto-claimed)" if auto_claim else "")
        )

        self._dispatch_notification(updated, old_status, new_status, notes)
        return updated

    # -----------------------------------------------------
    # Returns True when the call should auto-claim the complaint
    # -----------------------------------------------------
    def _check_actor(self, actor: Actor, complaint: Complaint) -> bool:
        if actor.role == Role.ADMIN:
            return False
        elif actor.role == Role.EMPLOYEE:
            if complaint.assigned_to_id is None:
                return True
            if complaint.assigned_to_id != actor.id:
                raise Forbidden("You are not allowed to update this complaint")
            return False
        elif actor.role == Role.CITIZEN:
            raise Forbidden("Citizens cannot change complaint status")
        raise ValueError(f"Unhandled role: {actor.role}")

    def _revert(self, original: Complaint, updated: Complaint):
        restore = {
            "status": original.status.value,
            "resolved_at": original.resolved_at.isoformat() if original.resolved_at else None,
            "assigned_to_id": original.assigned_to_id,
        }
        try:
            self.repository.update_complaint(original.id, restore)
            logger.warning(f"Reverted complaint {original.id} after log write failure")
        except RepositoryError:
            logger.error(
                f"Could not revert complaint {original.id} "
                f"(left at status {updated.status}) after log write failure"
            )

    def _dispatch_notification(self, complaint, old_status, new_status, notes):
        if self.notifier is None:
            return
        try:
            self.notifier(complaint, old_status, new_status, notes)
        except Exception as e:
            logger.error(f"Could not dispatch status notification for complaint {complaint.id}: {e}")
