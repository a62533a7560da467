from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from core.errors import Forbidden
from models.actor import Actor
from models.enums import Role
from services.complaint_repository import get_complaint_repository
from services.identity import IdentityResolver


# auto_error=False so a missing header becomes our own 401, not FastAPI's
bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================
# AUTH DECODING (verifies JWT + loads the actor)
# ============================================================
def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    repository=Depends(get_complaint_repository),
) -> Actor:
    token = credentials.credentials if credentials else None
    return IdentityResolver(repository).resolve(token)


# ============================================================
# ROLE CHECKER (basic role list guard)
# ============================================================
def requires_role(*allowed_roles: Role):
    def checker(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role not in allowed_roles:
            raise Forbidden(f"Requires one of: {[r.value for r in allowed_roles]}")
        return actor
    return checker


# ============================================================
# OPTIONAL AUTHENTICATION (for the public submission form)
# ============================================================
def get_optional_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    repository=Depends(get_complaint_repository),
) -> Optional[Actor]:
    """
    Returns the Actor if a token was sent, None otherwise.
    A token that is sent but invalid is still rejected.
    """
    if not credentials:
        return None
    return IdentityResolver(repository).resolve(credentials.credentials)
