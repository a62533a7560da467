# -------------------------
# Enums
# -------------------------
from .enums import (
    Role,
    ComplaintStatus,
    LogAction,
)

# -------------------------
# Actor (authenticated identity)
# -------------------------
from .actor import Actor

# -------------------------
# Complaint Models
# -------------------------
from .complaint import (
    Complaint,
    ComplaintDetail,
    ComplaintSubmit,
    ComplaintSubmitted,
    ComplaintStatusUpdate,
    ComplaintAssign,
    ComplaintNoteCreate,
    ComplaintFilters,
    ComplaintPage,
    Pagination,
)

# -------------------------
# Audit Trail
# -------------------------
from .complaint_log import ComplaintLogRead

# -------------------------
# Complainants / Staff / Types
# -------------------------
from .complainant import Complainant
from .user import StaffUser, StaffUserActiveUpdate
from .complaint_type import (
    ComplaintTypeCreate,
    ComplaintTypeRead,
    ComplaintTypeUpdate,
)

__all__ = [
    # enums
    "Role",
    "ComplaintStatus",
    "LogAction",

    # actor
    "Actor",

    # complaints
    "Complaint",
    "ComplaintDetail",
    "ComplaintSubmit",
    "ComplaintSubmitted",
    "ComplaintStatusUpdate",
    "ComplaintAssign",
    "ComplaintNoteCreate",
    "ComplaintFilters",
    "ComplaintPage",
    "Pagination",

    # logs
    "ComplaintLogRead",

    # people / types
    "Complainant",
    "StaffUser",
    "StaffUserActiveUpdate",
    "ComplaintTypeCreate",
    "ComplaintTypeRead",
    "ComplaintTypeUpdate",
]
