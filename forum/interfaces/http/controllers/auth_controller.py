# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from forum.application.use_cases.users.authenticate import AuthenticateUseCase
from forum.application.use_cases.users.login_user import LoginUserUseCase
from forum.application.use_cases.users.register_user import RegisterUserUseCase
from forum.interfaces.http.auth import auth_required
from forum.interfaces.http.dto.auth import (LoginRequestDTO, RegisteredDTO,
                                            RegisterRequestDTO, SessionStatusDTO,
                                            TokenIssuedDTO)
from forum.shared.errors.validation import raise_validation_error
from forum.shared.logging import logger


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        authenticate_use_case: AuthenticateUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._authenticate_use_case = authenticate_use_case

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        identity_id = self._register_use_case.execute(dto.username, dto.email, dto.password)
        return jsonify(RegisteredDTO(identity_id=identity_id).model_dump()), HTTPStatus.CREATED

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        token, expires_at = self._login_use_case.execute(dto.username, dto.password)
        payload = TokenIssuedDTO(token=token, expires_at=expires_at).model_dump(mode="json")
        return jsonify(payload), HTTPStatus.OK

    def session(self) -> tuple[Response, int]:
        payload = SessionStatusDTO(authenticated=True, identity_id=g.identity_id)
        logger.info(f"auth.session: ok identity_id={g.identity_id}")
        return jsonify(payload.model_dump()), HTTPStatus.OK

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule(
            "/session",
            view_func=auth_required(self._authenticate_use_case)(self.session),
            methods=["GET"],
        )
        return bp
