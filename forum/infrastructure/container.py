# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from forum.application.services.password_hashing import Argon2CredentialManager
from forum.application.services.session_authority import Clock, SessionAuthority, utc_now
from forum.application.use_cases.users.authenticate import AuthenticateUseCase
from forum.application.use_cases.users.login_user import LoginUserUseCase
from forum.application.use_cases.users.register_user import RegisterUserUseCase
from forum.infrastructure.db import Database
from forum.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyIdentityRepository,
    SqlAlchemySessionRepository,
)
from forum.interfaces.http.controllers.auth_controller import AuthController
from forum.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None, *, clock: Clock = utc_now) -> None:
        self.config = config or load_config()
        self.clock = clock

    @cached_property
    def database(self) -> Database:
        return Database(self.config.database)

    @cached_property
    def password_hasher(self) -> Argon2CredentialManager:
        auth = self.config.auth
        return Argon2CredentialManager(
            salt_length=auth.salt_length,
            time_cost=auth.argon2_time_cost,
            memory_cost=auth.argon2_memory_cost,
            parallelism=auth.argon2_parallelism,
        )

    @cached_property
    def identity_repository(self) -> SqlAlchemyIdentityRepository:
        return SqlAlchemyIdentityRepository(self.database.session_factory)

    @cached_property
    def session_repository(self) -> SqlAlchemySessionRepository:
        return SqlAlchemySessionRepository(self.database.session_factory)

    @cached_property
    def session_authority(self) -> SessionAuthority:
        auth = self.config.auth
        return SessionAuthority(
            identities=self.identity_repository,
            sessions=self.session_repository,
            session_ttl=auth.session_ttl,
            token_length=auth.token_length,
            clock=self.clock,
            resolve_requires_unexpired=auth.resolve_requires_unexpired,
        )

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.identity_repository,
            password_hasher=self.password_hasher,
            clock=self.clock,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.identity_repository,
            sessions=self.session_authority,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def authenticate_use_case(self) -> AuthenticateUseCase:
        return AuthenticateUseCase(sessions=self.session_authority)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            authenticate_use_case=self.authenticate_use_case,
        )
