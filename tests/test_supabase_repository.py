# tests/test_supabase_repository.py

"""
SupabaseComplaintRepository against a mocked PostgREST query builder.
"""

from unittest.mock import MagicMock, Mock, call

import pytest

from core.errors import ConfigurationError, RepositoryError
from models.enums import LogAction
from services.access_filter import ComplaintQuery, build_complaint_query
from services.complaint_repository import (
    COMPLAINT_DETAIL_SELECT,
    FACET_PAGE_SIZE,
    NAME_MATCH_LIMIT,
    SupabaseComplaintRepository,
    get_complaint_repository,
    sanitize_search,
)

COMPLAINT_ROW = {
    "id": "c1",
    "complainant_id": "z1",
    "type_id": "type-1",
    "assigned_to_id": None,
    "status": "NEW",
    "title": "Broken street light",
    "description": "The light has been out for a week",
    "created_at": "2024-01-01T08:00:00Z",
    "type": {"id": "type-1", "name": "Street lighting"},
    "complainant": {"id": "z1", "full_name": "Zeinab Citizen", "phone": "01000000000"},
    "assigned_to": None,
}

CHAIN_METHODS = ["select", "eq", "or_", "ilike", "is_", "in_", "limit", "order", "range", "insert", "update"]


def make_builder(*results, error=None):
    """A builder whose chain methods return itself; execute() yields `results` in order."""
    builder = MagicMock()
    for name in CHAIN_METHODS:
        getattr(builder, name).return_value = builder
    builder.not_ = builder
    if error is not None:
        builder.execute.side_effect = error
    else:
        builder.execute.side_effect = list(results)
    return builder


def result(data, count=None):
    return Mock(data=data, count=count)


@pytest.fixture
def client():
    return MagicMock()


def repository_with(client, builder):
    client.table.return_value = builder
    return SupabaseComplaintRepository(client)


# ------------------------------------------------------------------
# Single rows
# ------------------------------------------------------------------
def test_get_complaint(client):
    builder = make_builder(result([COMPLAINT_ROW]))
    repository = repository_with(client, builder)

    complaint = repository.get_complaint("c1")

    client.table.assert_called_with("complaints")
    builder.eq.assert_called_once_with("id", "c1")
    assert complaint.id == "c1"
    assert complaint.type.name == "Street lighting"
    assert complaint.created_at.tzinfo is not None


def test_get_complaint_missing_returns_none(client):
    repository = repository_with(client, make_builder(result([])))
    assert repository.get_complaint("nope") is None


def test_find_complainant_by_phone_or_national_id(client):
    builder = make_builder(result([]))
    repository = repository_with(client, builder)

    assert repository.find_complainant("0100", "12345678901234") is None
    builder.or_.assert_called_once_with("phone.eq.0100,national_id.eq.12345678901234")


# ------------------------------------------------------------------
# Listing
# ------------------------------------------------------------------
def test_list_applies_restrictions_filters_and_range(client):
    builder = make_builder(result([COMPLAINT_ROW], count=31))
    repository = repository_with(client, builder)
    query = ComplaintQuery(
        restrictions=[("assigned_to_id", "e1")],
        filters=[("status", "NEW")],
        page=2,
        page_size=10,
    )

    complaints, total = repository.list_complaints(query)

    assert total == 31
    assert [c.id for c in complaints] == ["c1"]
    assert builder.eq.call_args_list == [call("assigned_to_id", "e1"), call("status", "NEW")]
    builder.order.assert_called_once_with("created_at", desc=True)
    builder.range.assert_called_once_with(10, 19)
    builder.or_.assert_not_called()


def test_search_includes_matching_complainants(client):
    builder = make_builder(
        result([{"id": "z1"}, {"id": "z9"}]),
        result([COMPLAINT_ROW], count=1),
    )
    repository = repository_with(client, builder)

    repository.list_complaints(ComplaintQuery(search="zeinab"))

    builder.ilike.assert_called_once_with("full_name", "%zeinab%")
    builder.limit.assert_called_once_with(NAME_MATCH_LIMIT)
    builder.or_.assert_called_once_with(
        "title.ilike.%zeinab%,description.ilike.%zeinab%,complainant_id.in.(z1,z9)"
    )


def test_search_without_name_matches(client):
    builder = make_builder(result([]), result([], count=0))
    repository = repository_with(client, builder)

    complaints, total = repository.list_complaints(ComplaintQuery(search="light"))

    assert (complaints, total) == ([], 0)
    builder.or_.assert_called_once_with("title.ilike.%light%,description.ilike.%light%")


def test_sanitize_search_strips_filter_syntax():
    assert sanitize_search('a,b(c)%') == "a b c"
    assert sanitize_search('"*"') == ""


def test_unsafe_only_search_is_ignored(client):
    builder = make_builder(result([], count=0))
    repository = repository_with(client, builder)

    repository.list_complaints(ComplaintQuery(search="(,)"))

    builder.or_.assert_not_called()
    builder.ilike.assert_not_called()


# ------------------------------------------------------------------
# Writes
# ------------------------------------------------------------------
def test_conditional_update_uses_is_null_and_eq(client):
    updated_row = dict(COMPLAINT_ROW, status="IN_PROGRESS", assigned_to_id="e1")
    builder = make_builder(result([updated_row]), result([updated_row]))
    repository = repository_with(client, builder)

    updated = repository.update_complaint(
        "c1",
        {"status": "IN_PROGRESS", "assigned_to_id": "e1"},
        expected={"status": "NEW", "assigned_to_id": None},
    )

    builder.update.assert_called_once_with({"status": "IN_PROGRESS", "assigned_to_id": "e1"})
    assert builder.eq.call_args_list[:2] == [call("id", "c1"), call("status", "NEW")]
    builder.is_.assert_called_once_with("assigned_to_id", "null")
    assert updated.assigned_to_id == "e1"


def test_conditional_update_no_match_returns_none(client):
    repository = repository_with(client, make_builder(result([])))
    assert repository.update_complaint("c1", {"status": "CLOSED"}, expected={"status": "NEW"}) is None


def test_list_logs_excludes_actions(client):
    builder = make_builder(result([
        {
            "id": "l1",
            "complaint_id": "c1",
            "action": "STATUS_CHANGED",
            "old_status": "NEW",
            "new_status": "CLOSED",
            "created_at": "2024-01-02T00:00:00Z",
            "user": {"full_name": "Amal Admin"},
        }
    ]))
    repository = repository_with(client, builder)

    logs = repository.list_logs("c1", exclude_actions=[LogAction.INTERNAL_NOTE])

    builder.in_.assert_called_once_with("action", ["INTERNAL_NOTE"])
    builder.order.assert_called_once_with("created_at", desc=True)
    assert logs[0].user.full_name == "Amal Admin"


# ------------------------------------------------------------------
# Errors / wiring
# ------------------------------------------------------------------
def test_client_errors_become_repository_errors(client):
    repository = repository_with(client, make_builder(error=Exception("connection reset")))

    with pytest.raises(RepositoryError) as exc:
        repository.get_complaint("c1")

    assert exc.value.status_code == 500
    assert exc.value.detail == "Failed to load complaint"


def test_dependency_requires_configured_client(monkeypatch):
    monkeypatch.setattr("services.complaint_repository.get_supabase_client", lambda: None)
    with pytest.raises(ConfigurationError):
        get_complaint_repository()


def test_dependency_wraps_client(monkeypatch):
    fake_client = MagicMock()
    monkeypatch.setattr("services.complaint_repository.get_supabase_client", lambda: fake_client)
    assert get_complaint_repository().client is fake_client


def test_updated_complaint_is_reread_with_relations(client):
    bare_row = {k: v for k, v in COMPLAINT_ROW.items() if k not in ("type", "complainant", "assigned_to")}
    builder = make_builder(
        result([dict(bare_row, status="CLOSED")]),
        result([dict(COMPLAINT_ROW, status="CLOSED")]),
    )
    repository = repository_with(client, builder)

    updated = repository.update_complaint("c1", {"status": "CLOSED"})

    builder.select.assert_called_once_with(COMPLAINT_DETAIL_SELECT)
    assert updated.status == "CLOSED"
    assert updated.type.name == "Street lighting"
    assert updated.complainant.full_name == "Zeinab Citizen"


# ------------------------------------------------------------------
# Bounded reads
# ------------------------------------------------------------------
def test_facets_are_read_one_bounded_page_at_a_time(client, admin):
    builder = make_builder(result([{"id": "c1"}]))
    repository = repository_with(client, builder)

    repository.list_complaint_facets(build_complaint_query(admin), offset=2000)

    builder.order.assert_called_once_with("id")
    builder.range.assert_called_once_with(2000, 2000 + FACET_PAGE_SIZE - 1)


def test_broad_name_search_keeps_filter_short(client):
    many_ids = [{"id": f"00000000-0000-0000-0000-{i:012d}"} for i in range(NAME_MATCH_LIMIT)]
    builder = make_builder(result(many_ids), result([], count=0))
    repository = repository_with(client, builder)

    repository.list_complaints(ComplaintQuery(search="a"))

    builder.limit.assert_called_once_with(NAME_MATCH_LIMIT)
    [expression] = builder.or_.call_args.args
    assert expression.count(",") <= NAME_MATCH_LIMIT + 1
    assert len(expression) < 8000
