# tests/test_identity.py

"""
Tests for bearer token → actor resolution.
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from core.errors import ConfigurationError, Unauthenticated
from models.enums import Role
from services.identity import IdentityResolver, TokenVerifier

SECRET = "test-secret"


def make_token(claims: dict, secret: str = SECRET, expires_in: int = 3600) -> str:
    payload = dict(claims)
    payload["exp"] = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def resolver(repo):
    return IdentityResolver(repo, TokenVerifier(secret=SECRET, algorithm="HS256", audience=""))


def test_complainant_token_resolves_to_citizen(resolver):
    actor = resolver.resolve(make_token({"complainantId": "z1"}))

    assert actor.role == Role.CITIZEN
    assert actor.id == "z1"
    assert actor.complainant_id == "z1"
    assert actor.full_name == "Zeinab Citizen"


def test_user_token_resolves_to_staff(resolver):
    admin = resolver.resolve(make_token({"userId": "admin-1"}))
    employee = resolver.resolve(make_token({"userId": "e1"}))

    assert admin.role == Role.ADMIN
    assert employee.role == Role.EMPLOYEE
    assert employee.complainant_id is None


def test_supabase_sub_resolves_by_auth_user_id(repo, resolver):
    repo.add_user("e9", role="EMPLOYEE", auth_user_id="auth-uid-9")

    actor = resolver.resolve(make_token({"sub": "auth-uid-9"}))

    assert actor.id == "e9"
    assert actor.role == Role.EMPLOYEE


def test_complainant_claim_wins_over_user_claim(resolver):
    actor = resolver.resolve(make_token({"complainantId": "z2", "userId": "admin-1"}))
    assert actor.role == Role.CITIZEN


def test_unknown_complainant_rejected(resolver):
    with pytest.raises(Unauthenticated, match="complainant"):
        resolver.resolve(make_token({"complainantId": "ghost"}))


def test_inactive_user_rejected(repo, resolver):
    repo.add_user("e3", role="EMPLOYEE", is_active=False)
    with pytest.raises(Unauthenticated, match="inactive"):
        resolver.resolve(make_token({"userId": "e3"}))


def test_unknown_user_rejected(resolver):
    with pytest.raises(Unauthenticated):
        resolver.resolve(make_token({"userId": "nobody"}))


def test_user_with_unexpected_role_rejected(repo, resolver):
    repo.add_user("odd", role="CITIZEN")
    with pytest.raises(Unauthenticated):
        resolver.resolve(make_token({"userId": "odd"}))


def test_token_without_identity_rejected(resolver):
    with pytest.raises(Unauthenticated, match="missing"):
        resolver.resolve(make_token({"role": "ADMIN"}))


def test_expired_token_rejected(resolver):
    with pytest.raises(Unauthenticated):
        resolver.resolve(make_token({"userId": "admin-1"}, expires_in=-60))


def test_bad_signature_rejected(resolver):
    with pytest.raises(Unauthenticated):
        resolver.resolve(make_token({"userId": "admin-1"}, secret="someone-else"))


@pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
def test_missing_or_malformed_token_rejected(resolver, token):
    with pytest.raises(Unauthenticated):
        resolver.resolve(token)


def test_audience_checked_when_configured(repo):
    resolver = IdentityResolver(repo, TokenVerifier(secret=SECRET, audience="authenticated"))

    ok = make_token({"userId": "admin-1", "aud": "authenticated"})
    wrong = make_token({"userId": "admin-1", "aud": "anon"})

    assert resolver.resolve(ok).role == Role.ADMIN
    with pytest.raises(Unauthenticated):
        resolver.resolve(wrong)


def test_missing_secret_is_configuration_error(repo):
    resolver = IdentityResolver(repo, TokenVerifier(secret=""))
    with pytest.raises(ConfigurationError):
        resolver.resolve(make_token({"userId": "admin-1"}))
