from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# ROLE
# -----------------------------------------------------
class Role(BaseStrEnum):
    """Who is acting. ADMIN/EMPLOYEE are staff users, CITIZEN is a complainant."""

    ADMIN = "ADMIN"
    EMPLOYEE = "EMPLOYEE"
    CITIZEN = "CITIZEN"


STAFF_ROLES = (Role.ADMIN, Role.EMPLOYEE)


# -----------------------------------------------------
# COMPLAINT STATUS
# -----------------------------------------------------
class ComplaintStatus(BaseStrEnum):
    """Workflow state for a complaint. Any status may follow any other."""

    NEW = "NEW"
    UNDER_REVIEW = "UNDER_REVIEW"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"
    CLOSED = "CLOSED"


# -----------------------------------------------------
# COMPLAINT LOG ACTION
# -----------------------------------------------------
class LogAction(BaseStrEnum):
    """Kind of entry in the append-only complaint audit trail."""

    CREATED = "CREATED"
    STATUS_CHANGED = "STATUS_CHANGED"
    ASSIGNED = "ASSIGNED"
    INTERNAL_NOTE = "INTERNAL_NOTE"
