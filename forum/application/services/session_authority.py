# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Issuing and checking bearer session tokens."""

from __future__ import annotations

import secrets
import string
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from forum.domain.users.entities import TokenState
from forum.domain.users.exceptions import (
    IdentityNotFoundError,
    TokenExpiredError,
    TokenNotFoundError,
)
from forum.domain.users.repositories import IdentityRepository, SessionRepository
from forum.shared.errors.base import StorageError
from forum.shared.logging import logger

TOKEN_ALPHABET = string.ascii_letters + string.digits

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


def generate_token(length: int) -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


def _hint(token: str) -> str:
    return f"{token[:4]}…" if token else "<empty>"


class SessionAuthority:
    def __init__(
        self,
        *,
        identities: IdentityRepository,
        sessions: SessionRepository,
        session_ttl: timedelta = timedelta(days=10),
        token_length: int = 32,
        clock: Clock = utc_now,
        resolve_requires_unexpired: bool = True,
    ) -> None:
        if session_ttl <= timedelta(0):
            raise ValueError("session_ttl must be positive")
        self._identities = identities
        self._sessions = sessions
        self._session_ttl = session_ttl
        self._token_length = token_length
        self._clock = clock
        self._resolve_requires_unexpired = resolve_requires_unexpired

    def issue_token(self, identity_id: int) -> tuple[str, datetime]:
        if self._identities.find_username_by_id(identity_id) is None:
            raise IdentityNotFoundError(context={"identity_id": identity_id})

        token = generate_token(self._token_length)
        expires_at = self._clock() + self._session_ttl
        self._sessions.put_session(identity_id, token, expires_at)

        logger.info(
            f"session.issue: identity_id={identity_id} "
            f"exp={expires_at.isoformat()} tok={_hint(token)}"
        )
        return token, expires_at

    def validate_token(self, token: str) -> bool:
        if not token:
            return False
        bindings = self._sessions.find_sessions_by_token(token)
        if not bindings:
            logger.debug(f"session.validate: unknown tok={_hint(token)}")
            return False

        now = self._clock()
        valid = [binding for binding in bindings if binding.is_valid_at(now)]
        expired = len(bindings) - len(valid)
        if expired:
            logger.debug(f"session.validate: {expired} expired binding(s) tok={_hint(token)}")
        return bool(valid)

    def token_state(self, token: str) -> TokenState:
        bindings = self._sessions.find_sessions_by_token(token) if token else []
        if not bindings:
            raise TokenNotFoundError()
        now = self._clock()
        if any(binding.is_valid_at(now) for binding in bindings):
            return TokenState.VALID
        return TokenState.EXPIRED

    def resolve_identity(self, token: str) -> int:
        bindings = self._sessions.find_sessions_by_token(token) if token else []
        if not bindings:
            raise TokenNotFoundError()

        if self._resolve_requires_unexpired:
            now = self._clock()
            bindings = [binding for binding in bindings if binding.is_valid_at(now)]
            if not bindings:
                raise TokenExpiredError()

        identity_ids = {binding.identity_id for binding in bindings}
        if len(identity_ids) > 1:
            logger.error(
                f"session.resolve: token bound to {len(identity_ids)} identities tok={_hint(token)}"
            )
            raise StorageError("ambiguous_token_binding")
        return identity_ids.pop()


__all__ = ["Clock", "SessionAuthority", "generate_token", "utc_now"]
