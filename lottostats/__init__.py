"""Lottery draw history: ingestion and number-combination analysis."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Flask

try:
    from dotenv import load_dotenv
except Exception:  # pragma: no cover
    load_dotenv = None  # type: ignore[assignment]


def create_app(overrides: Mapping[str, Any] | None = None) -> Flask:
    """Application factory.

    Args:
        overrides: config values applied on top of the environment config.

    Returns:
        Configured Flask application.
    """
    if load_dotenv is not None:
        load_dotenv()

    from lottostats.config import get_config
    from lottostats.db import init_db
    from lottostats.error_handlers import register_error_handlers
    from lottostats.logging_config import configure_app_logging
    from lottostats.routes.combinations import combinations_bp
    from lottostats.routes.draws import draws_bp
    from lottostats.routes.health import health_bp

    app = Flask(__name__)
    app.config.from_object(get_config())
    if overrides:
        app.config.update(overrides)

    configure_app_logging(app)
    init_db(app)
    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(draws_bp)
    app.register_blueprint(combinations_bp)

    return app
