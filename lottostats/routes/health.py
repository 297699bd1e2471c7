"""Health check routes."""

from __future__ import annotations

from flask import Blueprint

from lottostats.db import get_store
from lottostats.utils.responses import ok

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health_check():
    """Report process and database liveness."""

    connected = get_store().is_connected()
    return ok({"status": "ok" if connected else "degraded", "database": connected})
