from __future__ import annotations

from collections.abc import Iterator, Sequence
from datetime import UTC, datetime, timedelta

import pytest

from forum.application.services.password_hashing import Argon2CredentialManager
from forum.domain.users.entities import Identity, SessionToken, StoredCredential
from forum.domain.users.exceptions import IdentityNotFoundError, UserAlreadyExistsError
from forum.domain.users.repositories import IdentityRepository, SessionRepository
from forum.infrastructure.container import Container
from forum.infrastructure.db import Database
from forum.shared.config import AppConfig, AuthConfig, DatabaseConfig


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class InMemoryIdentityRepository(IdentityRepository):
    def __init__(self) -> None:
        self._users: dict[int, Identity] = {}
        self._seq = 1

    def put_identity(
        self,
        username: str,
        email: str | None,
        credential_hash: str,
        salt: str,
        created_at: datetime,
    ) -> int:
        for user in self._users.values():
            if user.username == username or (email is not None and user.email == email):
                raise UserAlreadyExistsError()
        identity = Identity(
            id=self._seq,
            username=username,
            email=email,
            credential=StoredCredential(password_hash=credential_hash, salt=salt),
            created_at=created_at,
        )
        self._seq += 1
        self._users[identity.id] = identity
        return identity.id

    def find_identity_by_username(self, username: str) -> Identity | None:
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    def find_username_by_id(self, identity_id: int) -> str | None:
        user = self._users.get(identity_id)
        return user.username if user else None

    def replace_credential(self, identity_id: int, credential: StoredCredential) -> None:
        user = self._users[identity_id]
        self._users[identity_id] = Identity(
            id=user.id,
            username=user.username,
            email=user.email,
            credential=credential,
            created_at=user.created_at,
        )


class InMemorySessionRepository(SessionRepository):
    def __init__(self, identities: InMemoryIdentityRepository) -> None:
        self._identities = identities
        self.rows: list[SessionToken] = []

    def put_session(self, identity_id: int, token: str, expires_at: datetime) -> None:
        if self._identities.find_username_by_id(identity_id) is None:
            raise IdentityNotFoundError()
        self.rows.append(SessionToken(identity_id=identity_id, token=token, expires_at=expires_at))

    def find_sessions_by_token(self, token: str) -> Sequence[SessionToken]:
        return [row for row in self.rows if row.token == token]


FAST_ARGON2 = {"time_cost": 1, "memory_cost": 1024, "parallelism": 1}


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def hasher() -> Argon2CredentialManager:
    return Argon2CredentialManager(salt_length=16, **FAST_ARGON2)


@pytest.fixture()
def identities() -> InMemoryIdentityRepository:
    return InMemoryIdentityRepository()


@pytest.fixture()
def sessions(identities: InMemoryIdentityRepository) -> InMemorySessionRepository:
    return InMemorySessionRepository(identities)


@pytest.fixture()
def app_config(tmp_path, monkeypatch) -> AppConfig:
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "forum.log"))
    return AppConfig(
        database=DatabaseConfig(url="sqlite://"),
        auth=AuthConfig(
            argon2_time_cost=FAST_ARGON2["time_cost"],
            argon2_memory_cost=FAST_ARGON2["memory_cost"],
            argon2_parallelism=FAST_ARGON2["parallelism"],
        ),
    )


@pytest.fixture()
def database(app_config: AppConfig) -> Iterator[Database]:
    db = Database(app_config.database)
    db.init_db()
    yield db
    db.drop_all()
    db.dispose()


@pytest.fixture()
def container(app_config: AppConfig, clock: FakeClock) -> Iterator[Container]:
    c = Container(app_config, clock=clock)
    yield c
    c.database.dispose()
