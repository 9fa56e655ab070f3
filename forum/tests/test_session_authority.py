from __future__ import annotations

import string
from datetime import UTC, datetime, timedelta

import pytest

from forum.application.services.session_authority import SessionAuthority
from forum.domain.users.entities import SessionToken, TokenState
from forum.domain.users.exceptions import (
    IdentityNotFoundError,
    TokenExpiredError,
    TokenNotFoundError,
)
from forum.shared.errors.base import StorageError


def _make_identity(identities, username: str = "alice") -> int:
    return identities.put_identity(
        username, None, "$argon2id$stub", "saltsaltsalt", datetime(2026, 1, 1, tzinfo=UTC)
    )


@pytest.fixture()
def authority(identities, sessions, clock) -> SessionAuthority:
    return SessionAuthority(
        identities=identities,
        sessions=sessions,
        session_ttl=timedelta(days=10),
        clock=clock,
    )


def test_issued_token_validates(authority, identities, clock) -> None:
    identity_id = _make_identity(identities)

    token, expires_at = authority.issue_token(identity_id)

    assert authority.validate_token(token) is True
    assert expires_at == clock.now + timedelta(days=10)


def test_token_shape(authority, identities) -> None:
    token, _ = authority.issue_token(_make_identity(identities))

    assert len(token) == 32
    assert set(token) <= set(string.ascii_letters + string.digits)


def test_token_expires_after_ttl(authority, identities, clock) -> None:
    token, expires_at = authority.issue_token(_make_identity(identities))

    clock.now = expires_at - timedelta(seconds=1)
    assert authority.validate_token(token) is True

    clock.now = expires_at
    assert authority.validate_token(token) is False

    clock.advance(timedelta(days=1))
    assert authority.validate_token(token) is False


def test_two_tokens_for_same_identity_are_independent(authority, identities) -> None:
    identity_id = _make_identity(identities)

    first, _ = authority.issue_token(identity_id)
    second, _ = authority.issue_token(identity_id)

    assert first != second
    assert authority.validate_token(first)
    assert authority.validate_token(second)


def test_unknown_token_is_false_not_error(authority) -> None:
    assert authority.validate_token("NeverIssuedNeverIssuedNeverIssue") is False
    assert authority.validate_token("") is False


def test_issue_for_unknown_identity_raises(authority, sessions) -> None:
    with pytest.raises(IdentityNotFoundError):
        authority.issue_token(999)

    assert sessions.rows == []


def test_expired_duplicate_does_not_shadow_valid_binding(
    authority, identities, sessions, clock
) -> None:
    identity_id = _make_identity(identities)
    sessions.rows.append(
        SessionToken(identity_id=identity_id, token="dup", expires_at=clock.now - timedelta(days=1))
    )
    sessions.rows.append(
        SessionToken(identity_id=identity_id, token="dup", expires_at=clock.now + timedelta(days=1))
    )

    assert authority.validate_token("dup") is True
    assert authority.token_state("dup") is TokenState.VALID


def test_all_expired_duplicates_are_false(authority, identities, sessions, clock) -> None:
    identity_id = _make_identity(identities)
    for days in (1, 2):
        sessions.rows.append(
            SessionToken(
                identity_id=identity_id,
                token="old",
                expires_at=clock.now - timedelta(days=days),
            )
        )

    assert authority.validate_token("old") is False
    assert authority.token_state("old") is TokenState.EXPIRED


def test_resolve_identity_returns_owner(authority, identities) -> None:
    alice = _make_identity(identities, "alice")
    bob = _make_identity(identities, "bob")

    alice_token, _ = authority.issue_token(alice)
    bob_token, _ = authority.issue_token(bob)

    assert authority.resolve_identity(alice_token) == alice
    assert authority.resolve_identity(bob_token) == bob


def test_resolve_unknown_token_raises_not_found(authority) -> None:
    with pytest.raises(TokenNotFoundError):
        authority.resolve_identity("missing")
    with pytest.raises(TokenNotFoundError):
        authority.token_state("missing")


def test_resolve_expired_token_is_refused_by_default(authority, identities, clock) -> None:
    token, expires_at = authority.issue_token(_make_identity(identities))
    clock.now = expires_at + timedelta(seconds=1)

    with pytest.raises(TokenExpiredError):
        authority.resolve_identity(token)


def test_resolve_expired_token_when_policy_relaxed(identities, sessions, clock) -> None:
    authority = SessionAuthority(
        identities=identities,
        sessions=sessions,
        clock=clock,
        resolve_requires_unexpired=False,
    )
    identity_id = _make_identity(identities)
    token, expires_at = authority.issue_token(identity_id)
    clock.now = expires_at + timedelta(days=3)

    assert authority.resolve_identity(token) == identity_id


def test_resolve_token_bound_to_two_identities_is_storage_error(
    authority, identities, sessions, clock
) -> None:
    alice = _make_identity(identities, "alice")
    bob = _make_identity(identities, "bob")
    for identity_id in (alice, bob):
        sessions.rows.append(
            SessionToken(
                identity_id=identity_id, token="shared", expires_at=clock.now + timedelta(hours=1)
            )
        )

    with pytest.raises(StorageError):
        authority.resolve_identity("shared")


def test_ttl_is_configurable(identities, sessions, clock) -> None:
    authority = SessionAuthority(
        identities=identities,
        sessions=sessions,
        session_ttl=timedelta(minutes=5),
        token_length=48,
        clock=clock,
    )
    token, expires_at = authority.issue_token(_make_identity(identities))

    assert len(token) == 48
    assert expires_at - clock.now == timedelta(minutes=5)


def test_non_positive_ttl_is_rejected(identities, sessions) -> None:
    with pytest.raises(ValueError):
        SessionAuthority(identities=identities, sessions=sessions, session_ttl=timedelta(0))
