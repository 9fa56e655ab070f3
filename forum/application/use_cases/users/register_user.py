# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from forum.domain.users.exceptions import UserAlreadyExistsError
from forum.domain.users.repositories import CredentialHasher, IdentityRepository
from forum.shared.logging import logger


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: IdentityRepository,
        password_hasher: CredentialHasher,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._clock = clock

    def execute(self, username: str, email: str | None, password: str) -> int:
        # Early exit only; the store's unique constraint is what settles races.
        if self._users.find_identity_by_username(username) is not None:
            raise UserAlreadyExistsError(context={"field": "username"})

        credential = self._password_hasher.derive_credential(password)
        identity_id = self._users.put_identity(
            username,
            email or None,
            credential.password_hash,
            credential.salt,
            self._clock(),
        )
        logger.info(f"auth.register: ok identity_id={identity_id} username={username}")
        return identity_id
