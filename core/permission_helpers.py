from fastapi import Depends
from models.actor import Actor
from core.errors import Forbidden
from core.permissions import ROLE_PERMISSIONS
from dependencies.auth import get_current_actor


# -----------------------------------------------------
# Permission evaluation
# -----------------------------------------------------
def get_effective_permissions(actor: Actor) -> set:
    return set(ROLE_PERMISSIONS.get(actor.role.value, []))


def has_permission(actor: Actor, permission: str) -> bool:
    return permission in get_effective_permissions(actor)


# -----------------------------------------------------
# FastAPI dependency wrapper
# -----------------------------------------------------
def requires_permission(permission: str):
    """
    Usage:
        @router.patch("/{id}/assign")
        def assign(actor: Actor = Depends(requires_permission("complaints:assign"))):
    """

    def dependency(actor: Actor = Depends(get_current_actor)) -> Actor:
        if not has_permission(actor, permission):
            raise Forbidden(f"Insufficient permissions: '{permission}' required")
        return actor

    return dependency