# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from forum.shared.errors.base import DomainError, InfrastructureError


class NotFoundError(DomainError):
    code = "not_found"
    status = HTTPStatus.NOT_FOUND


class IdentityNotFoundError(NotFoundError):
    code = "identity_not_found"


class TokenNotFoundError(NotFoundError):
    code = "token_not_found"


class InvalidError(DomainError):
    code = "invalid"
    status = HTTPStatus.UNAUTHORIZED


class InvalidCredentialsError(InvalidError):
    code = "invalid_credentials"


class TokenExpiredError(InvalidError):
    code = "token_expired"


class ConflictError(DomainError):
    code = "conflict"
    status = HTTPStatus.CONFLICT


class UserAlreadyExistsError(ConflictError):
    code = "user_already_exists"


class CredentialError(InfrastructureError):
    pass


class HashingError(CredentialError):
    def __init__(self) -> None:
        super().__init__("hashing_error")


class VerificationError(CredentialError):
    def __init__(self, reason: str) -> None:
        super().__init__("credential_corrupt", context={"reason": reason})
