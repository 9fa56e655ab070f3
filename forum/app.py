# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from flask import Flask
from flask_cors import CORS

from forum.infrastructure.container import Container
from forum.shared.logging import logger, setup_logging
from forum.shared.middleware.error_handler import configure_error_handling
from forum.shared.middleware.request_logger import configure_request_logging


def create_app(container: Container | None = None) -> Flask:
    container = container or Container()
    config = container.config

    setup_logging(config.log_level)
    container.database.init_db()

    app = Flask(__name__)
    app.extensions["forum.container"] = container
    configure_error_handling(app, config)
    configure_request_logging(app, config)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/*": {"origins": config.security.allowed_origins}},
        "methods": ["GET", "POST", "DELETE", "PATCH", "OPTIONS"],
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    app.register_blueprint(container.auth_controller.as_blueprint())

    @app.get("/")
    def index() -> str:
        return "Hello, world!"

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("Cache-Control", "no-store")
        return resp

    logger.info("Flask app initialized")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=8000)
