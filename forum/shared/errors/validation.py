# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import StrEnum
from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


class ValidationErrorType(StrEnum):
    MISSING = "missing"
    USERNAME_INVALID_CHARS = "username_invalid_chars"
    EMAIL_INVALID = "email_invalid"


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    fields: set[str] = set()
    errors: list[dict[str, Any]] = []

    for error in exc.errors():
        field_path = ".".join(str(part) for part in error.get("loc", ()) if part is not None)
        if field_path:
            fields.add(field_path)

        entry: dict[str, Any] = {
            "field": field_path or "unknown",
            "type": error.get("type", "value_error"),
        }
        # ctx values can be exceptions or patterns; keep the envelope JSON-safe.
        if "ctx" in error:
            entry["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(entry)

    return {"fields": sorted(fields), "errors": errors}


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    raise ValidationError(context=format_pydantic_errors(exc)) from exc


__all__ = [
    "ValidationErrorType",
    "format_pydantic_errors",
    "raise_validation_error",
]
