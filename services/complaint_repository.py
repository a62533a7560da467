# services/complaint_repository.py

"""
Persistence boundary for complaints, backed by Supabase (PostgREST).

Every Supabase call goes through `_execute`, which turns client errors
into RepositoryError. Methods return pydantic models, or None when the
requested row does not exist.
"""

import re
from typing import Dict, Iterable, List, Optional, Tuple

from supabase import Client

from core.errors import ConfigurationError, repository_error
from core.supabase_client import get_supabase_client
from models.complainant import Complainant
from models.complaint import Complaint
from models.complaint_log import ComplaintLogRead
from models.complaint_type import ComplaintTypeRead
from models.user import StaffUser
from services.access_filter import ComplaintQuery


COMPLAINT_LIST_SELECT = (
    "*, "
    "type:complaint_types(id,name), "
    "complainant:complainants(id,full_name,phone), "
    "assigned_to:users(id,full_name)"
)

COMPLAINT_DETAIL_SELECT = (
    "*, "
    "type:complaint_types(id,name), "
    "complainant:complainants(id,full_name,phone,email), "
    "assigned_to:users(id,full_name,email)"
)

LOG_SELECT = "*, user:users(full_name)"

FACET_SELECT = "id,status,type_id,created_at"

# Rows per facet page. Stays at or below PostgREST max-rows (1000 on Supabase).
FACET_PAGE_SIZE = 1000

# Complainants matched by name per search; their ids go into the request URL
NAME_MATCH_LIMIT = 100

# Characters with meaning inside a PostgREST or=(...) expression
_SEARCH_UNSAFE = re.compile(r'[,()"\\%*]')


def sanitize_search(term: str) -> str:
    return _SEARCH_UNSAFE.sub(" ", term).strip()


def _first(rows):
    return rows[0] if rows else None


class SupabaseComplaintRepository:
    def __init__(self, client: Client):
        self.client = client

    # -----------------------------------------------------
    # Helper: run a query builder, normalize errors
    # -----------------------------------------------------
    def _execute(self, builder, operation: str):
        try:
            return builder.execute()
        except Exception as e:
            raise repository_error(e, operation) from e

    # =====================================================
    # STAFF USERS
    # =====================================================
    def get_staff_user(self, user_id: str) -> Optional[StaffUser]:
        result = self._execute(
            self.client.table("users").select("*").eq("id", user_id).limit(1),
            "Failed to load user",
        )
        row = _first(result.data)
        return StaffUser(**row) if row else None

    def get_staff_user_by_auth_id(self, auth_user_id: str) -> Optional[StaffUser]:
        result = self._execute(
            self.client.table("users").select("*").eq("auth_user_id", auth_user_id).limit(1),
            "Failed to load user",
        )
        row = _first(result.data)
        return StaffUser(**row) if row else None

    def list_staff_users(self, role: Optional[str] = None) -> List[StaffUser]:
        query = self.client.table("users").select("*")
        if role:
            query = query.eq("role", role)
        result = self._execute(query.order("full_name"), "Failed to list users")
        return [StaffUser(**row) for row in result.data or []]

    def set_staff_user_active(self, user_id: str, is_active: bool) -> Optional[StaffUser]:
        result = self._execute(
            self.client.table("users").update({"is_active": is_active}).eq("id", user_id),
            "Failed to update user",
        )
        row = _first(result.data)
        return StaffUser(**row) if row else None

    # =====================================================
    # COMPLAINANTS
    # =====================================================
    def get_complainant(self, complainant_id: str) -> Optional[Complainant]:
        result = self._execute(
            self.client.table("complainants").select("*").eq("id", complainant_id).limit(1),
            "Failed to load complainant",
        )
        row = _first(result.data)
        return Complainant(**row) if row else None

    def find_complainant(self, phone: str, national_id: str) -> Optional[Complainant]:
        result = self._execute(
            self.client.table("complainants")
            .select("*")
            .or_(f"phone.eq.{phone},national_id.eq.{national_id}")
            .limit(1),
            "Failed to look up complainant",
        )
        row = _first(result.data)
        return Complainant(**row) if row else None

    def create_complainant(self, data: dict) -> Complainant:
        result = self._execute(
            self.client.table("complainants").insert(data),
            "Failed to create complainant",
        )
        return Complainant(**result.data[0])

    def find_complainant_ids_by_name(self, term: str, limit: int = NAME_MATCH_LIMIT) -> List[str]:
        """
        Ids of complainants whose name contains `term`, at most `limit`.
        Broader terms only match complaints of the first `limit` complainants
        by name; title and description matches are not capped.
        """
        result = self._execute(
            self.client.table("complainants")
            .select("id")
            .ilike("full_name", f"%{term}%")
            .order("full_name")
            .limit(limit),
            "Failed to search complainants",
        )
        return [row["id"] for row in result.data or []]

    # =====================================================
    # COMPLAINTS
    # =====================================================
    def _apply_query(self, builder, query: ComplaintQuery):
        for column, value in query.equality_predicates():
            builder = builder.eq(column, value)

        if query.search:
            term = sanitize_search(query.search)
            if term:
                clauses = [f"title.ilike.%{term}%", f"description.ilike.%{term}%"]
                complainant_ids = self.find_complainant_ids_by_name(term)
                if complainant_ids:
                    clauses.append(f"complainant_id.in.({','.join(complainant_ids)})")
                builder = builder.or_(",".join(clauses))

        return builder

    def list_complaints(self, query: ComplaintQuery) -> Tuple[List[Complaint], int]:
        builder = self.client.table("complaints").select(COMPLAINT_LIST_SELECT, count="exact")
        builder = self._apply_query(builder, query)
        builder = (
            builder.order(query.order_by, desc=query.descending)
            .range(query.offset, query.offset + query.page_size - 1)
        )
        result = self._execute(builder, "Failed to list complaints")

        complaints = [Complaint(**row) for row in result.data or []]
        total = result.count if result.count is not None else len(complaints)
        return complaints, total

    def list_complaint_facets(
        self,
        query: ComplaintQuery,
        offset: int = 0,
        limit: int = FACET_PAGE_SIZE,
    ) -> List[dict]:
        """
        One page of lightweight rows (id, status, type_id, created_at) for
        aggregation, ordered by id so consecutive pages do not overlap.
        """
        builder = self.client.table("complaints").select(FACET_SELECT)
        builder = self._apply_query(builder, query)
        builder = builder.order("id").range(offset, offset + limit - 1)
        result = self._execute(builder, "Failed to load complaint statistics")
        return result.data or []

    def get_complaint(self, complaint_id: str) -> Optional[Complaint]:
        result = self._execute(
            self.client.table("complaints")
            .select(COMPLAINT_DETAIL_SELECT)
            .eq("id", complaint_id)
            .limit(1),
            "Failed to load complaint",
        )
        row = _first(result.data)
        return Complaint(**row) if row else None

    def create_complaint(self, data: dict) -> Complaint:
        result = self._execute(
            self.client.table("complaints").insert(data),
            "Failed to create complaint",
        )
        return Complaint(**result.data[0])

    def update_complaint(
        self,
        complaint_id: str,
        changes: dict,
        expected: Optional[Dict[str, Optional[str]]] = None,
    ) -> Optional[Complaint]:
        """
        Conditional update. Each `expected` column must still hold the given
        value (None means IS NULL) or nothing is written and None is returned.
        """
        builder = self.client.table("complaints").update(changes).eq("id", complaint_id)
        for column, value in (expected or {}).items():
            if value is None:
                builder = builder.is_(column, "null")
            else:
                builder = builder.eq(column, value)

        result = self._execute(builder, "Failed to update complaint")
        if not result.data:
            return None

        # update() returns the bare row; re-read it with its relations
        return self.get_complaint(complaint_id)

    # =====================================================
    # COMPLAINT LOGS (append-only)
    # =====================================================
    def insert_log(self, entry: dict) -> ComplaintLogRead:
        result = self._execute(
            self.client.table("complaint_logs").insert(entry),
            "Failed to write complaint log",
        )
        return ComplaintLogRead(**result.data[0])

    def list_logs(self, complaint_id: str, exclude_actions: Iterable[str] = ()) -> List[ComplaintLogRead]:
        builder = self.client.table("complaint_logs").select(LOG_SELECT).eq("complaint_id", complaint_id)
        excluded = [str(a) for a in exclude_actions]
        if excluded:
            builder = builder.not_.in_("action", excluded)
        result = self._execute(
            builder.order("created_at", desc=True),
            "Failed to load complaint logs",
        )
        return [ComplaintLogRead(**row) for row in result.data or []]

    # =====================================================
    # COMPLAINT TYPES
    # =====================================================
    def list_complaint_types(self, active_only: bool = True) -> List[ComplaintTypeRead]:
        builder = self.client.table("complaint_types").select("*")
        if active_only:
            builder = builder.eq("is_active", True)
        result = self._execute(builder.order("name"), "Failed to list complaint types")
        return [ComplaintTypeRead(**row) for row in result.data or []]

    def get_complaint_type(self, type_id: str) -> Optional[ComplaintTypeRead]:
        result = self._execute(
            self.client.table("complaint_types").select("*").eq("id", type_id).limit(1),
            "Failed to load complaint type",
        )
        row = _first(result.data)
        return ComplaintTypeRead(**row) if row else None

    def create_complaint_type(self, data: dict) -> ComplaintTypeRead:
        result = self._execute(
            self.client.table("complaint_types").insert(data),
            "Failed to create complaint type",
        )
        return ComplaintTypeRead(**result.data[0])

    def update_complaint_type(self, type_id: str, changes: dict) -> Optional[ComplaintTypeRead]:
        result = self._execute(
            self.client.table("complaint_types").update(changes).eq("id", type_id),
            "Failed to update complaint type",
        )
        row = _first(result.data)
        return ComplaintTypeRead(**row) if row else None


# ============================================================
# FastAPI dependency
# ============================================================
def get_complaint_repository() -> SupabaseComplaintRepository:
    client = get_supabase_client()
    if client is None:
        raise ConfigurationError("Supabase client not configured")
    return SupabaseComplaintRepository(client)
