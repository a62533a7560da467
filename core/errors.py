# core/errors.py

from typing import Optional


# ============================================================
# Domain errors (each kind knows its HTTP status)
# ============================================================
class ComplaintsError(Exception):
    """Base class for every error the complaint services raise."""

    status_code: int = 500
    default_detail: str = "Complaint service error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(ComplaintsError):
    """Missing/invalid/expired credential, or the identity is gone/inactive."""

    status_code = 401
    default_detail = "Invalid or expired authentication token"


class Forbidden(ComplaintsError):
    status_code = 403
    default_detail = "You do not have access to this complaint"


class NotFound(ComplaintsError):
    status_code = 404
    default_detail = "Complaint not found"


class ValidationFailed(ComplaintsError):
    status_code = 400
    default_detail = "Invalid data"


class Conflict(ComplaintsError):
    """The complaint changed between read and write."""

    status_code = 409
    default_detail = "Complaint was modified concurrently, please retry"


class ConfigurationError(ComplaintsError):
    status_code = 500
    default_detail = "Service is not configured"


class RepositoryError(ComplaintsError):
    """Storage-level failure (Supabase / PostgREST / network)."""

    status_code = 500
    default_detail = "Database operation failed"


def extract_supabase_error(error: Exception) -> str:
    """
    Safely extract readable details from Supabase Python client errors.
    Handles:
      • PostgREST errors
      • GoTrue (Auth) errors
      • Generic Python exceptions
    """

    # Case 1: Supabase Auth / GoTrue / PostgREST APIError
    message = getattr(error, "message", None)
    if message:
        return str(message)

    # Case 2: Supabase errors with args (common)
    if error.args:
        return str(error.args[0])

    # Case 3: Plain string fallback
    return str(error) or error.__class__.__name__


def repository_error(error: Exception, operation: str) -> RepositoryError:
    """
    Convert Supabase / database errors into a RepositoryError.
    Returns the exception (doesn't raise) so the caller can `raise ... from`.
    """
    from core.logging_config import logger

    detail = extract_supabase_error(error)
    logger.error(f"{operation}: {detail}")
    return RepositoryError(operation)
