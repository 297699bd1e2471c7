"""Fetch the results file and load it into the draw store.

Usage:
  lottostats-import                       # download SOURCE_URL, mode from OPERATION_MODE
  lottostats-import --mode reloadAll
  lottostats-import --source ./data/draws.csv --database-url sqlite:///./db/lotteries.db
"""

from __future__ import annotations

import argparse
import logging
import pathlib
from collections.abc import Sequence

try:
    from dotenv import load_dotenv
except Exception:  # pragma: no cover
    load_dotenv = None  # type: ignore[assignment]

from sqlalchemy.exc import SQLAlchemyError

from lottostats.config import get_config, resolve_database_url
from lottostats.db import create_store_engine
from lottostats.errors import AppError
from lottostats.fetcher import FetchError, download_file
from lottostats.logging_config import configure_logging
from lottostats.services.ingestion_service import IngestionMode, IngestionService
from lottostats.store import DrawStore

logger = logging.getLogger(__name__)


def _load_env() -> None:
    if load_dotenv is None:
        return
    load_dotenv()
    env_local = pathlib.Path(".env.local")
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)


def build_parser(config: type) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Download lottery draws and load them into the database")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in IngestionMode],
        default=config.OPERATION_MODE,
        help="insertNewOnly keeps stored draws; reloadAll drops and reloads the table",
    )
    parser.add_argument("--source", type=str, default=None, help="Ingest a local file instead of downloading")
    parser.add_argument("--url", type=str, default=config.SOURCE_URL or None, help="Results file URL")
    parser.add_argument("--save-dir", type=str, default=config.SAVE_DIRECTORY)
    parser.add_argument("--file-name", type=str, default=config.SOURCE_FILE_NAME)
    parser.add_argument("--timeout", type=float, default=config.FETCH_TIMEOUT)
    parser.add_argument("--insecure", action="store_true", help="Skip TLS certificate verification")
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Override DB connection string (e.g. sqlite:///./db/lotteries.db)",
    )
    parser.add_argument("--progress", action="store_true", help="Show a progress bar while inserting")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run one ingestion. Returns the process exit code."""

    _load_env()
    config = get_config()
    args = build_parser(config).parse_args(argv)

    configure_logging(
        config.LOG_LEVEL,
        log_file=config.LOG_FILE or None,
        max_bytes=config.LOG_FILE_MAX_BYTES,
        backup_count=config.LOG_FILE_BACKUP_COUNT,
    )
    logger.info("Import started (mode=%s)", args.mode)

    try:
        if args.source:
            source = pathlib.Path(args.source)
        else:
            if not args.url:
                logger.error("No source: pass --source or set SOURCE_URL / --url")
                return 2
            logger.debug("Downloading CSV file from %s", args.url)
            source = download_file(
                args.url,
                args.save_dir,
                args.file_name,
                timeout=args.timeout,
                verify=config.SOURCE_VERIFY_TLS and not args.insecure,
            )
    except FetchError as exc:
        logger.error("Download failed: %s", exc)
        return 1

    database_url = str(args.database_url) if args.database_url else resolve_database_url()
    try:
        engine = create_store_engine(database_url)
    except (SQLAlchemyError, ImportError) as exc:
        # The message may echo the URL and its password.
        logger.error("Invalid database URL (%s)", type(exc).__name__)
        return 1

    store = DrawStore(engine)
    service = IngestionService(progress=args.progress)

    try:
        store.connect()
        store.create_table_if_not_exists()
        result = service.run(store, source, args.mode)
    except AppError as exc:
        logger.error("Import failed: %s", exc.message)
        return 1
    finally:
        store.close()
        engine.dispose()

    logger.info(
        "Import finished: %s rows read, %s inserted, %s skipped",
        result.total_rows,
        result.inserted,
        result.skipped,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
