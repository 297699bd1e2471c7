"""Draw listing routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from lottostats.db import get_store
from lottostats.errors import ValidationError
from lottostats.schemas.draw import DrawListQuerySchema, DrawSchema
from lottostats.utils.responses import ok

draws_bp = Blueprint("draws", __name__)

_query_schema = DrawListQuerySchema()
_draws_schema = DrawSchema(many=True)


@draws_bp.get("/draws")
def list_draws():
    """List draws newest first.

    Query params:
    - page: 1-based page number (default 1)
    - limit: page size (default DEFAULT_PAGE_SIZE, at most MAX_PAGE_SIZE)
    """

    args = _query_schema.load(request.args)
    page = int(args["page"])
    limit = int(args["limit"] or current_app.config["DEFAULT_PAGE_SIZE"])

    max_page_size = int(current_app.config["MAX_PAGE_SIZE"])
    if limit > max_page_size:
        raise ValidationError(
            message=f"The maximum allowed limit is {max_page_size}",
            details={"limit": [f"Must be <= {max_page_size}"]},
        )

    offset = (page - 1) * limit
    draws = get_store().list_draws(limit, offset)
    return ok(_draws_schema.dump(draws), meta={"page": page, "limit": limit})


@draws_bp.get("/draws/count")
def count_draws():
    return ok({"total": get_store().count_draws()})
