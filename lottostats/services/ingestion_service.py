"""Load the results file into the draw store.

Two modes:

- ``insertNewOnly``: insert rows whose draw id is not stored yet.
- ``reloadAll``: drop and recreate the table, then insert every row.

The source is fully parsed before storage is touched, and each run is one
transaction: either every new row is committed or none is.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from tqdm import tqdm

from lottostats.errors import IngestionError, StoreError, ValidationError
from lottostats.models.draw import DrawRecord
from lottostats.sources import read_draw_source
from lottostats.store import DrawStore

logger = logging.getLogger(__name__)

SourceReader = Callable[[str | os.PathLike[str]], Sequence[DrawRecord]]


class IngestionMode(str, Enum):
    INSERT_NEW_ONLY = "insertNewOnly"
    RELOAD_ALL = "reloadAll"


@dataclass(frozen=True)
class IngestionResult:
    mode: IngestionMode
    total_rows: int
    inserted: int
    skipped: int


class IngestionService:
    """Reconcile a results file with the draw store."""

    def __init__(self, reader: SourceReader | None = None, *, progress: bool = False) -> None:
        self._reader = reader or read_draw_source
        self._progress = progress

    def run(self, store: DrawStore, source: str | os.PathLike[str], mode: str | IngestionMode) -> IngestionResult:
        try:
            resolved = IngestionMode(mode)
        except ValueError as exc:
            raise ValidationError(
                message=f"Unknown operation mode: {mode}",
                details={"mode": [m.value for m in IngestionMode]},
            ) from exc

        if resolved is IngestionMode.RELOAD_ALL:
            return self.reload_all(store, source)
        return self.insert_new_only(store, source)

    def insert_new_only(self, store: DrawStore, source: str | os.PathLike[str]) -> IngestionResult:
        logger.debug("Mode: insertNewOnly. Inserting only new records from %s", source)
        records = self._reader(source)

        try:
            with store.transaction():
                store.create_table_if_not_exists()
                inserted, skipped = self._insert_records(store, records, check_existing=True)
        except IngestionError:
            raise
        except StoreError as exc:
            raise IngestionError(message=f"Error inserting new records: {exc.message}", details=exc.details) from exc

        result = IngestionResult(IngestionMode.INSERT_NEW_ONLY, len(records), inserted, skipped)
        logger.info("Inserted %s new draws (%s already stored)", inserted, skipped)
        return result

    def reload_all(self, store: DrawStore, source: str | os.PathLike[str]) -> IngestionResult:
        logger.debug("Mode: reloadAll. Dropping all draws and reloading from %s", source)
        records = self._reader(source)

        try:
            with store.foreign_keys_suspended(), store.transaction():
                store.drop_table_if_exists()
                store.create_table_if_not_exists()
                inserted, skipped = self._insert_records(store, records, check_existing=False)
        except IngestionError:
            raise
        except StoreError as exc:
            raise IngestionError(message=f"Error reloading all data: {exc.message}", details=exc.details) from exc

        result = IngestionResult(IngestionMode.RELOAD_ALL, len(records), inserted, skipped)
        logger.info("Draws table recreated with %s draws", inserted)
        return result

    def _insert_records(
        self,
        store: DrawStore,
        records: Sequence[DrawRecord],
        *,
        check_existing: bool,
    ) -> tuple[int, int]:
        inserted = 0
        skipped = 0
        seen: set[int] = set()

        for record in tqdm(records, desc="Ingesting", unit="draw", disable=not self._progress):
            # Repeated ids inside one file: first occurrence wins.
            if record.draw_id in seen or (check_existing and store.draw_exists(record.draw_id)):
                skipped += 1
                continue
            store.insert_draw(record)
            seen.add(record.draw_id)
            inserted += 1

        return inserted, skipped
