# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from forum.shared.logging import logger

from .base import AppError, InfrastructureError


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    if isinstance(error, InfrastructureError):
        # Operational faults keep their code in the log but never leak details to callers.
        logger.error(f"Infrastructure error {error.code} on {request.method} {request.path}")
        return jsonify({"error": "internal_error"}), error.status
    logger.warning(f"Handled application error {error.code} on {request.method} {request.path}")
    return jsonify(error.to_dict()), error.status


def register_error_handler(
    app: Flask,
    *,
    debug_mode: bool = False,
    default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
) -> None:

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        return exc

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        if debug_mode:
            logger.exception(f"Unhandled exception: {request.method} {request.path}")
        else:
            logger.error(f"Error: {type(exc).__name__} on {request.method} {request.path}")
        return jsonify({"error": "internal_error"}), default_status
