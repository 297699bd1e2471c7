"""Schemas for draw rows and the draws API."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from lottostats.models.draw import INTEGER_MAX, INTEGER_MIN, PRIMARY_COLUMNS, DrawRecord


def _column_integer() -> fields.Integer:
    return fields.Integer(required=True, validate=validate.Range(min=INTEGER_MIN, max=INTEGER_MAX))


class DrawRowSchema(Schema):
    """Coerce one textual row of the results file into a ``DrawRecord``."""

    class Meta:
        unknown = EXCLUDE

    CONCURSO = _column_integer()
    NPRODUCTO = _column_integer()
    R1 = _column_integer()
    R2 = _column_integer()
    R3 = _column_integer()
    R4 = _column_integer()
    R5 = _column_integer()
    R6 = _column_integer()
    R7 = _column_integer()
    BOLSA = fields.Decimal(required=True)
    FECHA = fields.String(required=True, validate=validate.Length(min=1))

    @post_load
    def _to_record(self, data, **kwargs):  # type: ignore[no-untyped-def]
        return DrawRecord(
            draw_id=data["CONCURSO"],
            product_number=data["NPRODUCTO"],
            primary_numbers=tuple(data[c] for c in PRIMARY_COLUMNS),
            bonus_number=data["R7"],
            jackpot=data["BOLSA"],
            draw_date=data["FECHA"].strip(),
        )


class DrawSchema(Schema):
    draw_id = fields.Int(required=True)
    product_number = fields.Int(required=True)
    primary_numbers = fields.List(fields.Int(), required=True)
    bonus_number = fields.Int(required=True)
    jackpot = fields.Decimal(as_string=True, required=True)
    draw_date = fields.Str(required=True)


class DrawListQuerySchema(Schema):
    """Validate ``GET /draws`` query params. The page-size cap is applied by the route."""

    class Meta:
        unknown = EXCLUDE

    page = fields.Integer(required=False, load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(required=False, load_default=None, validate=validate.Range(min=1))
