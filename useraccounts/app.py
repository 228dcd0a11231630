# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit

from flask import Flask
from flask_cors import CORS

from useraccounts.infrastructure.container import Container
from useraccounts.infrastructure.db import init_db
from useraccounts.infrastructure.observability import configure_metrics
from useraccounts.shared.config import AppConfig, load_config
from useraccounts.shared.logging import logger, setup_logging
from useraccounts.shared.middleware.error_handler import configure_error_handling
from useraccounts.shared.middleware.request_logger import configure_request_logging

EXPOSED_HEADERS = ["authorization", "x-items-count", "x-page-links", "X-Request-ID"]


def create_app(config: AppConfig | None = None) -> Flask:
    config = config or load_config()
    setup_logging(debug_mode=config.debug_logging)

    container = Container(config)
    init_db(container.database)

    app = Flask(__name__)
    app.extensions["container"] = container
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)
    configure_metrics(config.observability.metrics_enabled)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}},
        "expose_headers": EXPOSED_HEADERS,
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.users_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("X-Permitted-Cross-Domain-Policies", "none")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    atexit.register(container.close)

    logger.info(f"Flask app initialized env={config.app_env}")
    return app


if __name__ == "__main__":
    _config = load_config()
    create_app(_config).run(host="0.0.0.0", port=_config.app_port)
