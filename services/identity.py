# services/identity.py

"""
Bearer token → Actor.

Tokens are HS256 JWTs. The payload names exactly one identity:
  • complainantId  → a citizen (complainants table)
  • userId         → a staff user by primary key
  • sub            → a staff user by Supabase Auth uid (users.auth_user_id)
"""

from typing import Optional

from jose import JWTError, jwt

from core.config import settings
from core.errors import ConfigurationError, Unauthenticated
from core.logging_config import logger
from models.actor import Actor
from models.enums import Role, STAFF_ROLES


class TokenVerifier:
    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        audience: Optional[str] = None,
    ):
        self.secret = secret if secret is not None else settings.JWT_SECRET
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.audience = audience if audience is not None else settings.JWT_AUDIENCE

    def verify(self, token: str) -> dict:
        """Check signature and expiry; return the claims."""
        if not self.secret:
            logger.error("JWT_SECRET is not set: cannot verify tokens")
            raise ConfigurationError("Token verification is not configured")

        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"verify_aud": bool(self.audience)},
            )
        except JWTError as e:
            logger.info(f"Rejected token: {e}")
            raise Unauthenticated() from e


class IdentityResolver:
    def __init__(self, repository, verifier: Optional[TokenVerifier] = None):
        self.repository = repository
        self.verifier = verifier or TokenVerifier()

    def resolve(self, token: Optional[str]) -> Actor:
        if not token:
            raise Unauthenticated("Access token required")

        claims = self.verifier.verify(token)

        complainant_id = claims.get("complainantId")
        if complainant_id:
            return self._resolve_citizen(str(complainant_id))

        user_id = claims.get("userId")
        if user_id:
            user = self.repository.get_staff_user(str(user_id))
        elif claims.get("sub"):
            user = self.repository.get_staff_user_by_auth_id(str(claims["sub"]))
        else:
            raise Unauthenticated("Invalid access token - missing user id")

        if user is None or not user.is_active or user.role not in Role.list():
            raise Unauthenticated("Invalid or inactive user")

        role = Role(user.role)
        if role not in STAFF_ROLES:
            raise Unauthenticated("Invalid or inactive user")

        return Actor(
            id=user.id,
            role=role,
            full_name=user.full_name,
            email=user.email,
            phone=user.phone,
        )

    def _resolve_citizen(self, complainant_id: str) -> Actor:
        complainant = self.repository.get_complainant(complainant_id)
        if complainant is None:
            raise Unauthenticated("Invalid complainant")

        return Actor(
            id=complainant.id,
            role=Role.CITIZEN,
            complainant_id=complainant.id,
            full_name=complainant.full_name,
            email=complainant.email,
            phone=complainant.phone,
        )
