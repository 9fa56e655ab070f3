# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services.password_hashing import Argon2CredentialManager
from .services.session_authority import SessionAuthority
from .use_cases.users.authenticate import AuthenticateUseCase
from .use_cases.users.login_user import LoginUserUseCase
from .use_cases.users.register_user import RegisterUserUseCase

__all__ = [
    "Argon2CredentialManager",
    "AuthenticateUseCase",
    "LoginUserUseCase",
    "RegisterUserUseCase",
    "SessionAuthority",
]
