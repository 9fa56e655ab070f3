from __future__ import annotations

from datetime import timedelta

import pytest

from forum.application.services.session_authority import SessionAuthority
from forum.application.use_cases.users.authenticate import AuthenticateUseCase
from forum.application.use_cases.users.login_user import LoginUserUseCase
from forum.application.use_cases.users.register_user import RegisterUserUseCase
from forum.domain.users.entities import StoredCredential
from forum.domain.users.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    InvalidError,
    UserAlreadyExistsError,
    VerificationError,
)


@pytest.fixture()
def flows(identities, sessions, hasher, clock):
    authority = SessionAuthority(
        identities=identities, sessions=sessions, session_ttl=timedelta(days=10), clock=clock
    )
    register = RegisterUserUseCase(users=identities, password_hasher=hasher, clock=clock)
    login = LoginUserUseCase(users=identities, sessions=authority, password_hasher=hasher)
    authenticate = AuthenticateUseCase(sessions=authority)
    return register, login, authenticate


def test_register_stores_hashed_credential(flows, identities, clock) -> None:
    register, _, _ = flows

    identity_id = register.execute("alice", "a@x.com", "pw123")

    stored = identities.find_identity_by_username("alice")
    assert stored is not None
    assert stored.id == identity_id
    assert stored.email == "a@x.com"
    assert stored.created_at == clock.now
    assert stored.credential.password_hash != "pw123"
    assert stored.credential.salt


def test_register_without_email(flows, identities) -> None:
    register, _, _ = flows

    register.execute("bob", "", "pw123")

    assert identities.find_identity_by_username("bob").email is None


def test_register_duplicate_username_conflicts(flows) -> None:
    register, _, _ = flows
    register.execute("alice", "a@x.com", "pw123")

    with pytest.raises(UserAlreadyExistsError) as excinfo:
        register.execute("alice", "other@x.com", "pw456")

    assert isinstance(excinfo.value, ConflictError)
    assert excinfo.value.status == 409


def test_register_duplicate_email_conflicts_at_store(flows) -> None:
    register, _, _ = flows
    register.execute("alice", "a@x.com", "pw123")

    with pytest.raises(ConflictError):
        register.execute("alice2", "a@x.com", "pw123")


def test_end_to_end_register_login_authenticate(flows, clock) -> None:
    register, login, authenticate = flows
    register.execute("alice", "a@x.com", "pw123")

    token, expires_at = login.execute("alice", "pw123")

    assert expires_at - clock.now == timedelta(days=10)
    assert authenticate.execute(token) is True

    clock.advance(timedelta(days=10, seconds=1))
    assert authenticate.execute(token) is False


def test_login_wrong_password_issues_no_token(flows, sessions) -> None:
    register, login, _ = flows
    register.execute("alice", "a@x.com", "pw123")

    with pytest.raises(InvalidCredentialsError) as excinfo:
        login.execute("alice", "wrongpw")

    assert isinstance(excinfo.value, InvalidError)
    assert sessions.rows == []


def test_login_unknown_user_is_invalid_credentials(flows, sessions) -> None:
    _, login, _ = flows

    with pytest.raises(InvalidCredentialsError):
        login.execute("nobody", "pw123")

    assert sessions.rows == []


def test_login_with_corrupt_credential_is_not_reported_as_wrong_password(
    flows, identities, sessions
) -> None:
    register, login, _ = flows
    identity_id = register.execute("alice", None, "pw123")
    identities.replace_credential(
        identity_id, StoredCredential(password_hash="garbage", salt="abcdefghijkl")
    )

    with pytest.raises(VerificationError):
        login.execute("alice", "pw123")

    assert sessions.rows == []


def test_each_login_yields_a_new_valid_token(flows) -> None:
    register, login, authenticate = flows
    register.execute("alice", None, "pw123")

    first, _ = login.execute("alice", "pw123")
    second, _ = login.execute("alice", "pw123")

    assert first != second
    assert authenticate.execute(first)
    assert authenticate.execute(second)


def test_resolve_attributes_token_to_identity(flows) -> None:
    register, login, authenticate = flows
    identity_id = register.execute("alice", None, "pw123")
    token, _ = login.execute("alice", "pw123")

    assert authenticate.resolve(token) == identity_id


def test_authenticate_garbage_token_is_false(flows) -> None:
    _, _, authenticate = flows

    assert authenticate.execute("definitely-not-a-token") is False


class _CountingHasher:
    def __init__(self, inner) -> None:
        self._inner = inner
        self.verify_calls = 0

    def derive_credential(self, plaintext_password: str) -> StoredCredential:
        return self._inner.derive_credential(plaintext_password)

    def verify_credential(self, plaintext_password: str, stored_credential: StoredCredential) -> bool:
        self.verify_calls += 1
        return self._inner.verify_credential(plaintext_password, stored_credential)


def test_unknown_and_known_username_cost_the_same_hash_work(
    identities, sessions, hasher, clock
) -> None:
    counting = _CountingHasher(hasher)
    authority = SessionAuthority(identities=identities, sessions=sessions, clock=clock)
    register = RegisterUserUseCase(users=identities, password_hasher=counting, clock=clock)
    login = LoginUserUseCase(users=identities, sessions=authority, password_hasher=counting)
    register.execute("alice", None, "pw123")

    with pytest.raises(InvalidCredentialsError):
        login.execute("alice", "wrongpw")
    assert counting.verify_calls == 1

    with pytest.raises(InvalidCredentialsError):
        login.execute("nobody", "wrongpw")
    assert counting.verify_calls == 2
    assert sessions.rows == []
