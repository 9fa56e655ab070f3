# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from datetime import datetime

from forum.application.services.session_authority import SessionAuthority
from forum.domain.users.entities import StoredCredential
from forum.domain.users.exceptions import InvalidCredentialsError
from forum.domain.users.repositories import CredentialHasher, IdentityRepository
from forum.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: IdentityRepository,
        sessions: SessionAuthority,
        password_hasher: CredentialHasher,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._password_hasher = password_hasher
        self._decoy: StoredCredential | None = None

    def _decoy_credential(self) -> StoredCredential:
        if self._decoy is None:
            self._decoy = self._password_hasher.derive_credential(secrets.token_urlsafe(24))
        return self._decoy

    def execute(self, username: str, password: str) -> tuple[str, datetime]:
        user = self._users.find_identity_by_username(username)
        if user is None:
            # Pay the Argon2 cost of a real check for unknown usernames too.
            self._password_hasher.verify_credential(password, self._decoy_credential())
            logger.warning(f"auth.login: unknown username={username}")
            raise InvalidCredentialsError()

        # VerificationError (corrupt stored credential) propagates on purpose.
        if not self._password_hasher.verify_credential(password, user.credential):
            logger.warning(f"auth.login: bad password identity_id={user.id}")
            raise InvalidCredentialsError()

        token, expires_at = self._sessions.issue_token(user.id)
        logger.info(f"auth.login: ok identity_id={user.id}")
        return token, expires_at
