from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from forum.shared.errors.validation import ValidationErrorType

_USERNAME_RE = re.compile(r"^[a-zA-Z0-9_.-]+$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _check_username(value: str) -> str:
    value = value.strip()
    if not value:
        raise PydanticCustomError(
            ValidationErrorType.MISSING,
            "Username cannot be empty",
            {}
        )

    if not _USERNAME_RE.match(value):
        raise PydanticCustomError(
            ValidationErrorType.USERNAME_INVALID_CHARS,
            "Username may contain only ASCII letters, digits, '_', '.' and '-'",
            {"pattern": _USERNAME_RE.pattern}
        )

    return value


class RegisterRequestDTO(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    email: str | None = Field(default=None, max_length=254)
    password: str = Field(min_length=1, max_length=1024)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        value = value.strip()
        if not _EMAIL_RE.match(value):
            raise PydanticCustomError(
                ValidationErrorType.EMAIL_INVALID,
                "Email address is not valid",
                {}
            )
        return value


class LoginRequestDTO(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=1024)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        return _check_username(value)


class RegisteredDTO(BaseModel):
    ok: bool = True
    identity_id: int


class TokenIssuedDTO(BaseModel):
    ok: bool = True
    token: str
    expires_at: datetime


class SessionStatusDTO(BaseModel):
    authenticated: bool
    identity_id: int | None = None
