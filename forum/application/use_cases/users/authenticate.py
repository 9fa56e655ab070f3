# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Use-case for checking a presented bearer token."""

from __future__ import annotations

from forum.application.services.session_authority import SessionAuthority


class AuthenticateUseCase:
    def __init__(self, *, sessions: SessionAuthority) -> None:
        self._sessions = sessions

    def execute(self, presented_token: str) -> bool:
        return self._sessions.validate_token(presented_token)

    def resolve(self, presented_token: str) -> int:
        return self._sessions.resolve_identity(presented_token)
