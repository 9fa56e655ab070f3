# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import Identity, SessionToken, StoredCredential, TokenState
from .exceptions import (
    ConflictError,
    CredentialError,
    HashingError,
    IdentityNotFoundError,
    InvalidCredentialsError,
    InvalidError,
    NotFoundError,
    TokenExpiredError,
    TokenNotFoundError,
    UserAlreadyExistsError,
    VerificationError,
)
from .repositories import CredentialHasher, IdentityRepository, SessionRepository

__all__ = [
    "ConflictError",
    "CredentialError",
    "CredentialHasher",
    "HashingError",
    "Identity",
    "IdentityNotFoundError",
    "IdentityRepository",
    "InvalidCredentialsError",
    "InvalidError",
    "NotFoundError",
    "SessionRepository",
    "SessionToken",
    "StoredCredential",
    "TokenExpiredError",
    "TokenNotFoundError",
    "TokenState",
    "UserAlreadyExistsError",
    "VerificationError",
]
