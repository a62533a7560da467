# routers/types.py

from typing import List

from fastapi import APIRouter, Depends

from core.errors import NotFound
from core.logging_config import logger
from core.permission_helpers import requires_permission
from core.utils import sanitize
from models.actor import Actor
from models.complaint_type import ComplaintTypeCreate, ComplaintTypeRead, ComplaintTypeUpdate
from services.complaint_repository import get_complaint_repository

router = APIRouter(
    prefix="/types",
    tags=["Complaint Types"],
)


# -----------------------------------------------------
# LIST (public, used by the submission form)
# -----------------------------------------------------
@router.get("", response_model=List[ComplaintTypeRead])
def list_types(repository=Depends(get_complaint_repository)):
    return repository.list_complaint_types(active_only=True)


# -----------------------------------------------------
# CREATE (admin)
# -----------------------------------------------------
@router.post("", response_model=ComplaintTypeRead, status_code=201)
def create_type(
    payload: ComplaintTypeCreate,
    actor: Actor = Depends(requires_permission("types:write")),
    repository=Depends(get_complaint_repository),
):
    data = sanitize(payload.model_dump())
    data["is_active"] = True
    created = repository.create_complaint_type(data)
    logger.info(f"Admin {actor.id} created complaint type {created.id} ({created.name})")
    return created


# -----------------------------------------------------
# UPDATE / (DE)ACTIVATE (admin)
# -----------------------------------------------------
@router.patch("/{type_id}", response_model=ComplaintTypeRead)
def update_type(
    type_id: str,
    payload: ComplaintTypeUpdate,
    actor: Actor = Depends(requires_permission("types:write")),
    repository=Depends(get_complaint_repository),
):
    changes = sanitize(payload.model_dump(exclude_unset=True))
    if not changes:
        existing = repository.get_complaint_type(type_id)
        if existing is None:
            raise NotFound("Complaint type not found")
        return existing

    updated = repository.update_complaint_type(type_id, changes)
    if updated is None:
        raise NotFound("Complaint type not found")

    logger.info(f"Admin {actor.id} updated complaint type {type_id}: {changes}")
    return updated
