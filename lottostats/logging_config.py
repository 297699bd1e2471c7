"""Logging configuration."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from flask import Flask

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(
    level: str = "INFO",
    *,
    log_file: str | None = None,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """Console logs, plus a size-rotated file when ``log_file`` is set.

    Note: Using stdlib logging only (no extra deps).
    """

    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"))

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, handlers=handlers)

    # Reduce noisy loggers if needed
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def configure_app_logging(app: Flask) -> None:
    configure_logging(
        str(app.config.get("LOG_LEVEL", "INFO")),
        log_file=app.config.get("LOG_FILE") or None,
        max_bytes=int(app.config.get("LOG_FILE_MAX_BYTES", 5 * 1024 * 1024)),
        backup_count=int(app.config.get("LOG_FILE_BACKUP_COUNT", 5)),
    )
