"""Shared fixtures: a throwaway SQLite database per test and CSV helpers."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from decimal import Decimal
from pathlib import Path

import pytest

from lottostats.db import create_store_engine
from lottostats.models.draw import DrawRecord
from lottostats.store import DrawStore

HEADER = "CONCURSO,NPRODUCTO,R1,R2,R3,R4,R5,R6,R7,BOLSA,FECHA"


def make_record(
    draw_id: int,
    numbers: Sequence[int],
    *,
    bonus: int = 0,
    product: int = 40,
    jackpot: str = "1000000",
    draw_date: str = "01/01/2024",
) -> DrawRecord:
    return DrawRecord(
        draw_id=draw_id,
        product_number=product,
        primary_numbers=tuple(numbers),  # type: ignore[arg-type]
        bonus_number=bonus,
        jackpot=Decimal(jackpot),
        draw_date=draw_date,
    )


def csv_line(record: DrawRecord) -> str:
    fields = [
        record.draw_id,
        record.product_number,
        *record.primary_numbers,
        record.bonus_number,
        record.jackpot,
        record.draw_date,
    ]
    return ",".join(str(f) for f in fields)


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'db' / 'lotteries.db'}"


@pytest.fixture
def engine(database_url: str):
    engine = create_store_engine(database_url)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine) -> Iterable[DrawStore]:
    store = DrawStore(engine)
    store.connect()
    store.create_table_if_not_exists()
    yield store
    store.close()


@pytest.fixture
def seed(store: DrawStore) -> Callable[..., None]:
    def _seed(*records: DrawRecord) -> None:
        with store.transaction():
            for record in records:
                store.insert_draw(record)

    return _seed


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    def _write(lines: Iterable[str | DrawRecord], *, name: str = "draws.csv", header: str | None = HEADER) -> Path:
        out = [header] if header is not None else []
        out.extend(csv_line(line) if isinstance(line, DrawRecord) else line for line in lines)
        path = tmp_path / name
        path.write_text("\n".join(out) + ("\n" if out else ""), encoding="utf-8")
        return path

    return _write
