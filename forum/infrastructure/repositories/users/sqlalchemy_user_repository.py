# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, MultipleResultsFound
from sqlalchemy.orm import Session

from forum.domain.users.entities import Identity as DomainIdentity
from forum.domain.users.entities import SessionToken as DomainSessionToken
from forum.domain.users.entities import StoredCredential
from forum.domain.users.exceptions import IdentityNotFoundError, UserAlreadyExistsError
from forum.domain.users.repositories import IdentityRepository, SessionRepository
from forum.infrastructure.db.models import AuthenticationKey, User
from forum.infrastructure.unit_of_work import unit_of_work_scope
from forum.shared.errors.base import StorageError
from forum.shared.logging import logger


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _to_domain(row: User) -> DomainIdentity:
    return DomainIdentity(
        id=row.unique_id,
        username=row.username,
        email=row.email,
        credential=StoredCredential(password_hash=row.password_hash, salt=row.password_salt),
        created_at=_as_utc(row.registration_datetime),
    )


class SqlAlchemyIdentityRepository(IdentityRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def put_identity(
        self,
        username: str,
        email: str | None,
        credential_hash: str,
        salt: str,
        created_at: datetime,
    ) -> int:
        with unit_of_work_scope(self._session_factory) as session:
            row = User(
                username=username,
                email=email,
                password_hash=credential_hash,
                password_salt=salt,
                registration_datetime=_as_utc(created_at),
            )
            session.add(row)
            try:
                session.flush()
            except IntegrityError as exc:
                logger.warning(f"identities.put: uniqueness violation username={username}")
                raise UserAlreadyExistsError() from exc
            return row.unique_id

    def find_identity_by_username(self, username: str) -> DomainIdentity | None:
        with unit_of_work_scope(self._session_factory) as session:
            try:
                row = session.execute(
                    select(User).where(User.username == username)
                ).scalar_one_or_none()
            except MultipleResultsFound as exc:
                raise StorageError("duplicate_username", context={"username": username}) from exc
            return _to_domain(row) if row else None

    def find_username_by_id(self, identity_id: int) -> str | None:
        with unit_of_work_scope(self._session_factory) as session:
            try:
                return session.execute(
                    select(User.username).where(User.unique_id == identity_id)
                ).scalar_one_or_none()
            except MultipleResultsFound as exc:
                raise StorageError("duplicate_identity", context={"identity_id": identity_id}) from exc


class SqlAlchemySessionRepository(SessionRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def put_session(self, identity_id: int, token: str, expires_at: datetime) -> None:
        with unit_of_work_scope(self._session_factory) as session:
            if session.get(User, identity_id) is None:
                raise IdentityNotFoundError(context={"identity_id": identity_id})
            session.add(
                AuthenticationKey(
                    user_id=identity_id,
                    authentication_key=token,
                    expiration=_as_utc(expires_at),
                )
            )
            try:
                session.flush()
            except IntegrityError as exc:
                # Identity removed between the check and the insert.
                raise IdentityNotFoundError(context={"identity_id": identity_id}) from exc

    def find_sessions_by_token(self, token: str) -> Sequence[DomainSessionToken]:
        with unit_of_work_scope(self._session_factory) as session:
            rows = session.execute(
                select(AuthenticationKey).where(AuthenticationKey.authentication_key == token)
            ).scalars().all()
            return [
                DomainSessionToken(
                    identity_id=row.user_id,
                    token=row.authentication_key,
                    expires_at=_as_utc(row.expiration),
                )
                for row in rows
            ]
