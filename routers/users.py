# routers/users.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from core.errors import NotFound, ValidationFailed
from core.logging_config import logger
from core.permission_helpers import requires_permission
from models.actor import Actor
from models.enums import STAFF_ROLES, Role
from models.user import StaffUser, StaffUserActiveUpdate
from services.complaint_repository import get_complaint_repository

router = APIRouter(
    prefix="/users",
    tags=["Staff Users"],
)


@router.get("", response_model=List[StaffUser])
def list_users(
    role: Optional[Role] = Query(None, description="ADMIN or EMPLOYEE"),
    actor: Actor = Depends(requires_permission("users:read")),
    repository=Depends(get_complaint_repository),
):
    """Staff accounts. Use role=EMPLOYEE for the assignment picker."""
    if role is not None and role not in STAFF_ROLES:
        raise ValidationFailed("role must be ADMIN or EMPLOYEE")
    return repository.list_staff_users(role.value if role else None)


@router.patch("/{user_id}/active", response_model=StaffUser)
def set_user_active(
    user_id: str,
    payload: StaffUserActiveUpdate,
    actor: Actor = Depends(requires_permission("users:write")),
    repository=Depends(get_complaint_repository),
):
    """
    Activate or deactivate a staff account.
    Deactivated users are rejected at authentication time.
    """
    if user_id == actor.id and not payload.is_active:
        raise ValidationFailed("You cannot deactivate your own account")

    updated = repository.set_staff_user_active(user_id, payload.is_active)
    if updated is None:
        raise NotFound("User not found")

    logger.info(f"Admin {actor.id} set user {user_id} is_active={payload.is_active}")
    return updated
