# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


@dataclass(slots=True, frozen=True)
class StoredCredential:
    """Argon2 encoded hash plus the salt it was derived with."""

    password_hash: str
    salt: str

    def __repr__(self) -> str:
        return "StoredCredential(password_hash=<redacted>, salt=<redacted>)"


@dataclass(slots=True, frozen=True)
class Identity:

    id: int
    username: str
    email: str | None
    credential: StoredCredential
    created_at: datetime


class TokenState(StrEnum):
    VALID = "valid"
    EXPIRED = "expired"


@dataclass(slots=True, frozen=True)
class SessionToken:

    identity_id: int
    token: str
    expires_at: datetime

    def state_at(self, now: datetime) -> TokenState:
        if now < self.expires_at:
            return TokenState.VALID
        return TokenState.EXPIRED

    def is_valid_at(self, now: datetime) -> bool:
        return self.state_at(now) is TokenState.VALID
