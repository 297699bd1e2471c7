"""Read the published results file into draw records."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pandas as pd
from marshmallow import ValidationError as MarshmallowValidationError

from lottostats.errors import IngestionError
from lottostats.models.draw import SOURCE_COLUMNS, DrawRecord
from lottostats.schemas.draw import DrawRowSchema

logger = logging.getLogger(__name__)

_row_schema = DrawRowSchema()


def _load_frame(source: Path) -> pd.DataFrame | None:
    try:
        frame = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError:
        return None
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as exc:
        raise IngestionError(message=f"Could not read source file {source}", details=str(exc)) from exc

    frame.columns = [str(c).strip() for c in frame.columns]
    return frame


def read_draw_source(path: str | os.PathLike[str]) -> list[DrawRecord]:
    """Parse the whole file and coerce every row.

    Nothing is returned unless every row is valid, so callers can parse
    before touching storage.
    """

    source = Path(path)
    frame = _load_frame(source)
    if frame is None:
        logger.info("Source file %s is empty", source)
        return []

    missing = [c for c in SOURCE_COLUMNS if c not in frame.columns]
    if missing:
        raise IngestionError(
            message=f"Source file {source} is missing required columns: {', '.join(missing)}",
            details={"missing_columns": missing},
        )

    records: list[DrawRecord] = []
    errors: dict[int, dict] = {}
    for row_no, row in enumerate(frame[list(SOURCE_COLUMNS)].to_dict(orient="records"), start=1):
        try:
            records.append(_row_schema.load(row))
        except MarshmallowValidationError as exc:
            errors[row_no] = exc.messages  # type: ignore[assignment]

    if errors:
        first = min(errors)
        raise IngestionError(
            message=f"Invalid rows in {source} (first bad row: {first}, fields: {', '.join(sorted(errors[first]))})",
            details=errors,
        )

    logger.debug("Parsed %s rows from %s", len(records), source)
    return records
