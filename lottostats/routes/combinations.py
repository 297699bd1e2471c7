"""Combination analysis routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from lottostats.db import get_store
from lottostats.schemas.combination import (
    CombinationQuerySchema,
    CombinationStatSchema,
    MembershipResultSchema,
    MembershipSearchSchema,
)
from lottostats.services.combination_service import CombinationAnalysisService
from lottostats.services.membership_service import MembershipLookupService
from lottostats.utils.responses import ok

combinations_bp = Blueprint("combinations", __name__)

_query_schema = CombinationQuerySchema()
_stats_schema = CombinationStatSchema(many=True)
_search_schema = MembershipSearchSchema()
_result_schema = MembershipResultSchema()
_analysis = CombinationAnalysisService()
_lookup = MembershipLookupService()


@combinations_bp.get("/combinations")
def frequent_combinations():
    """Top 20 k-number combinations (k in 1..6, default 1)."""

    args = _query_schema.load(request.args)
    stats = _analysis.frequent_combinations(get_store(), int(args["k"]))
    return ok(_stats_schema.dump(stats))


@combinations_bp.post("/combinations/search")
def search_combination():
    """How many draws contain all of the given numbers."""

    payload = request.get_json(silent=True) or {}
    data = _search_schema.load(payload)

    result = _lookup.search(get_store(), data.get("numbers"))
    return ok(_result_schema.dump(result))
