# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from .entities import Identity, SessionToken, StoredCredential


class IdentityRepository(Protocol):
    def put_identity(
        self,
        username: str,
        email: str | None,
        credential_hash: str,
        salt: str,
        created_at: datetime,
    ) -> int: ...
    def find_identity_by_username(self, username: str) -> Identity | None: ...
    def find_username_by_id(self, identity_id: int) -> str | None: ...


class SessionRepository(Protocol):
    def put_session(self, identity_id: int, token: str, expires_at: datetime) -> None: ...
    def find_sessions_by_token(self, token: str) -> Sequence[SessionToken]: ...


class CredentialHasher(Protocol):
    def derive_credential(self, plaintext_password: str) -> StoredCredential: ...
    def verify_credential(
        self, plaintext_password: str, stored_credential: StoredCredential
    ) -> bool: ...
