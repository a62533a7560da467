# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from fastapi.testclient import TestClient
from typing import Generator

from main import create_app
from models.actor import Actor
from models.enums import Role
from services.complaint_repository import get_complaint_repository

from fakes import InMemoryComplaintRepository


@pytest.fixture
def repo() -> InMemoryComplaintRepository:
    """
    Seeded repository:
      • admin-1 (ADMIN), e1 / e2 (EMPLOYEE)
      • complainants z1, z2
      • c1 filed by z1, unassigned, NEW
      • c2 filed by z2, assigned to e2, IN_PROGRESS
    """
    repository = InMemoryComplaintRepository()
    repository.add_type("type-1", "Street lighting")
    repository.add_type("type-2", "Sewage")

    repository.add_user("admin-1", role="ADMIN", full_name="Amal Admin")
    repository.add_user("e1", role="EMPLOYEE", full_name="Essam Employee")
    repository.add_user("e2", role="EMPLOYEE", full_name="Eman Employee")

    repository.add_complainant("z1", full_name="Zeinab Citizen", email="zeinab@example.com")
    repository.add_complainant("z2", full_name="Ziad Citizen")

    repository.add_complaint("c1", "z1", title="Broken street light", type_id="type-1")
    repository.add_complaint(
        "c2", "z2",
        title="Sewage overflow",
        description="Water is overflowing near the school",
        type_id="type-2",
        assigned_to_id="e2",
        status="IN_PROGRESS",
    )
    return repository


@pytest.fixture
def admin() -> Actor:
    return Actor(id="admin-1", role=Role.ADMIN, full_name="Amal Admin")


@pytest.fixture
def employee() -> Actor:
    return Actor(id="e1", role=Role.EMPLOYEE, full_name="Essam Employee")


@pytest.fixture
def other_employee() -> Actor:
    return Actor(id="e2", role=Role.EMPLOYEE, full_name="Eman Employee")


@pytest.fixture
def citizen() -> Actor:
    return Actor(id="z1", role=Role.CITIZEN, complainant_id="z1", full_name="Zeinab Citizen")


@pytest.fixture
def other_citizen() -> Actor:
    return Actor(id="z2", role=Role.CITIZEN, complainant_id="z2", full_name="Ziad Citizen")


@pytest.fixture(scope="function")
def app(repo):
    """Create a test FastAPI application wired to the in-memory repository."""
    application = create_app()
    application.dependency_overrides[get_complaint_repository] = lambda: repo
    yield application
    application.dependency_overrides = {}


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def act_as(app):
    """
    Pretend auth already succeeded for the given actor.

    Usage:
        act_as(admin)
        client.get("/complaints")
    """
    from dependencies.auth import get_current_actor

    def _act_as(actor: Actor):
        app.dependency_overrides[get_current_actor] = lambda: actor

    return _act_as


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Reset the in-memory rate limiter before each test."""
    from core.rate_limiter import reset_rate_limits as _reset
    _reset()
    yield
    _reset()
