"""Draw history stored in one wide table.

Columns keep the names used by the published results file:
- CONCURSO (PK, draw number)
- NPRODUCTO (product / game variant)
- R1..R6 (primary numbers), R7 (bonus number)
- BOLSA (jackpot), FECHA (draw date as recorded)
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from lottostats.models.base import Base

DRAWS_TABLE = "Concursos"

PRIMARY_COLUMNS = ("R1", "R2", "R3", "R4", "R5", "R6")
SOURCE_COLUMNS = ("CONCURSO", "NPRODUCTO", *PRIMARY_COLUMNS, "R7", "BOLSA", "FECHA")

# Range of a 64-bit signed INTEGER column.
INTEGER_MIN = -(2**63)
INTEGER_MAX = 2**63 - 1


class DecimalText(TypeDecorator):
    """Decimal kept as its exact text form. SQLite has no native decimal."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):  # type: ignore[no-untyped-def]
        return None if value is None else str(Decimal(value))

    def process_result_value(self, value, dialect):  # type: ignore[no-untyped-def]
        return None if value is None else Decimal(str(value))


Jackpot = Numeric(18, 2).with_variant(DecimalText(), "sqlite")


class Draw(Base):
    """One row per draw with 6 primary numbers + bonus."""

    __tablename__ = DRAWS_TABLE

    draw_id: Mapped[int] = mapped_column("CONCURSO", Integer, primary_key=True, autoincrement=False)
    product_number: Mapped[int] = mapped_column("NPRODUCTO", Integer, nullable=False)

    r1: Mapped[int] = mapped_column("R1", Integer, nullable=False)
    r2: Mapped[int] = mapped_column("R2", Integer, nullable=False)
    r3: Mapped[int] = mapped_column("R3", Integer, nullable=False)
    r4: Mapped[int] = mapped_column("R4", Integer, nullable=False)
    r5: Mapped[int] = mapped_column("R5", Integer, nullable=False)
    r6: Mapped[int] = mapped_column("R6", Integer, nullable=False)

    bonus_number: Mapped[int] = mapped_column("R7", Integer, nullable=False)
    jackpot: Mapped[Decimal] = mapped_column("BOLSA", Jackpot, nullable=False)
    draw_date: Mapped[str] = mapped_column("FECHA", Text, nullable=False)


@dataclass(frozen=True)
class DrawRecord:
    draw_id: int
    product_number: int
    primary_numbers: tuple[int, int, int, int, int, int]
    bonus_number: int
    jackpot: Decimal
    draw_date: str

    def to_params(self) -> dict[str, object]:
        """Bind parameters keyed by source column name."""

        params: dict[str, object] = {
            "CONCURSO": self.draw_id,
            "NPRODUCTO": self.product_number,
            "R7": self.bonus_number,
            "BOLSA": self.jackpot,
            "FECHA": self.draw_date,
        }
        for column, number in zip(PRIMARY_COLUMNS, self.primary_numbers):
            params[column] = number
        return params

    @classmethod
    def from_mapping(cls, row: dict) -> "DrawRecord":
        """Build a record from a row mapping keyed by source column name."""

        jackpot = row["BOLSA"]
        return cls(
            draw_id=int(row["CONCURSO"]),
            product_number=int(row["NPRODUCTO"]),
            primary_numbers=tuple(int(row[c]) for c in PRIMARY_COLUMNS),  # type: ignore[arg-type]
            bonus_number=int(row["R7"]),
            jackpot=jackpot if isinstance(jackpot, Decimal) else Decimal(str(jackpot)),
            draw_date=str(row["FECHA"]),
        )
