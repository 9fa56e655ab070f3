# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps

from flask import g, jsonify, request

from forum.application.use_cases.users.authenticate import AuthenticateUseCase
from forum.domain.users.exceptions import InvalidError, NotFoundError
from forum.shared.logging import logger


def bearer_token() -> str:
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth[7:].strip()
    return ""


def auth_required(authenticate: AuthenticateUseCase) -> Callable:
    def decorator(f):
        @wraps(f)
        def inner(*a, **kw):
            token = bearer_token()
            if not token:
                logger.warning(f"No bearer token on {request.method} {request.path}")
                return jsonify({"error": "unauthorized"}), 401

            if not authenticate.execute(token):
                logger.warning(
                    f"Auth failed (token not found/expired) on {request.method} {request.path}"
                )
                return jsonify({"error": "unauthorized"}), 401

            try:
                g.identity_id = authenticate.resolve(token)
            except (NotFoundError, InvalidError):
                # Expired between the validity check and the lookup.
                return jsonify({"error": "unauthorized"}), 401

            logger.debug(f"Auth OK: identity={g.identity_id} {request.method} {request.path}")
            return f(*a, **kw)

        return inner

    return decorator
