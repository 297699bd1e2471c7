"""Schemas for the combination analysis API."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields


class CombinationQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    # Range is enforced by the analyzer so every caller gets the same rule.
    k = fields.Integer(required=False, load_default=1)


class CombinationStatSchema(Schema):
    combination = fields.List(fields.Int(), required=True)
    frequency = fields.Int(required=True)


class MembershipSearchSchema(Schema):
    """Validate ``POST /combinations/search`` payloads."""

    numbers = fields.List(fields.Integer(strict=True), required=True, allow_none=True)


class MembershipResultSchema(Schema):
    numbers = fields.List(fields.Int(), required=True)
    exists = fields.Bool(required=True)
    frequency = fields.Int(required=True)
