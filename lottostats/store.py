"""Draw store: the only gateway to the draws table.

A store owns exactly one connection between ``connect()`` and ``close()``.
Callers open a store per unit of work (an HTTP request, a CLI run) and
never share it across concurrent operations.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import Executable, func, insert, inspect, select, text
from sqlalchemy.engine import Connection, CursorResult, Engine
from sqlalchemy.exc import SQLAlchemyError

from lottostats.errors import QueryError, SchemaError, StoreConnectionError
from lottostats.models.draw import DRAWS_TABLE, PRIMARY_COLUMNS, Draw, DrawRecord

logger = logging.getLogger(__name__)

# sqlite3 raises a bare OverflowError for ints outside 64 bits.
_STATEMENT_ERRORS = (SQLAlchemyError, OverflowError)

draws = Draw.__table__


def _sqlite_file(engine: Engine) -> Path | None:
    url = engine.url
    if url.get_backend_name() != "sqlite":
        return None
    database = url.database
    if not database or database == ":memory:" or database.startswith("file:"):
        return None
    return Path(database)


class DrawStore:
    """Connection-scoped access to the ``Concursos`` table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._conn: Connection | None = None

    def __enter__(self) -> "DrawStore":
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def engine(self) -> Engine:
        return self._engine

    # -- connection lifecycle -------------------------------------------------

    def connect(self) -> None:
        """Open the connection, creating the database directory if needed."""

        try:
            db_file = _sqlite_file(self._engine)
            if db_file is not None:
                directory = db_file.parent
                if not directory.exists():
                    directory.mkdir(parents=True, exist_ok=True)
                    logger.debug("Database directory created: %s", directory)
                if not db_file.exists():
                    logger.debug("Database not found at %s; it will be created", db_file)

            self._conn = self._engine.connect()
        except (OSError, SQLAlchemyError) as exc:
            logger.error("Failed to connect to the database: %s", exc)
            raise StoreConnectionError(details=str(exc)) from exc

        logger.info("Database connection established")

    def is_connected(self) -> bool:
        """Probe the connection. Never raises."""

        if self._conn is None or self._conn.closed:
            logger.warning("Database connection not initialized")
            return False
        try:
            with self._unit() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as exc:
            logger.error("Database connection check failed: %s", exc)
            return False

    def close(self) -> None:
        if self._conn is None or self._conn.closed:
            logger.warning("Attempted to close a database connection that is closed or was never opened")
            self._conn = None
            return
        try:
            self._conn.close()
            logger.info("Database connection closed")
        except SQLAlchemyError as exc:
            logger.error("Error while closing the database connection: %s", exc)
        finally:
            self._conn = None

    def _require(self) -> Connection:
        if self._conn is None or self._conn.closed:
            raise StoreConnectionError(message="Database connection is not open")
        return self._conn

    @contextmanager
    def _unit(self) -> Iterator[Connection]:
        # Join the caller's transaction if one is open, otherwise run as its own.
        conn = self._require()
        if conn.in_transaction():
            yield conn
            return
        with conn.begin():
            yield conn

    # -- transactions ---------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator["DrawStore"]:
        """Run the block as one atomic unit: commit on success, rollback on error.

        A failing rollback is logged; the original error is what propagates.
        """

        conn = self._require()
        try:
            trans = conn.begin()
        except SQLAlchemyError as exc:
            raise QueryError(message="Failed to begin transaction", details=str(exc)) from exc
        logger.debug("Transaction started")
        try:
            yield self
        except BaseException:
            try:
                trans.rollback()
                logger.info("Transaction rolled back")
            except SQLAlchemyError as rollback_exc:
                logger.error("Rollback failed: %s", rollback_exc)
            raise
        try:
            trans.commit()
        except SQLAlchemyError as exc:
            raise QueryError(message="Failed to commit transaction", details=str(exc)) from exc
        logger.debug("Transaction committed")

    @contextmanager
    def foreign_keys_suspended(self) -> Iterator[None]:
        """Disable SQLite foreign-key enforcement around the block.

        SQLite ignores the pragma inside a transaction, so this must wrap
        ``transaction()`` rather than run inside it. Other backends: no-op.
        """

        conn = self._require()
        if self._engine.dialect.name != "sqlite" or conn.in_transaction():
            yield
            return

        raw = conn.connection.driver_connection
        previous = raw.execute("PRAGMA foreign_keys").fetchone()[0]
        raw.execute("PRAGMA foreign_keys = OFF")
        try:
            yield
        finally:
            raw.execute(f"PRAGMA foreign_keys = {'ON' if previous else 'OFF'}")

    # -- schema ---------------------------------------------------------------

    def table_exists(self) -> bool:
        try:
            with self._unit() as conn:
                return inspect(conn).has_table(DRAWS_TABLE)
        except SQLAlchemyError as exc:
            raise SchemaError(message="Error checking whether the draws table exists", details=str(exc)) from exc

    def create_table_if_not_exists(self) -> None:
        if self.table_exists():
            return
        try:
            with self._unit() as conn:
                draws.create(conn, checkfirst=True)
        except SQLAlchemyError as exc:
            raise SchemaError(message=f"Error creating table '{DRAWS_TABLE}'", details=str(exc)) from exc
        logger.info("Table '%s' created", DRAWS_TABLE)

    def drop_table_if_exists(self) -> None:
        try:
            with self._unit() as conn:
                draws.drop(conn, checkfirst=True)
        except SQLAlchemyError as exc:
            raise SchemaError(message=f"Error dropping table '{DRAWS_TABLE}'", details=str(exc)) from exc
        logger.debug("Table '%s' dropped", DRAWS_TABLE)

    # -- raw parameterized access ---------------------------------------------

    def get(self, query: str, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        """Fetch a single row as a dict. Values must be passed as bound ``params``."""

        try:
            with self._unit() as conn:
                row = conn.execute(text(query), dict(params or {})).mappings().first()
        except _STATEMENT_ERRORS as exc:
            raise QueryError(message="Error fetching data", details=str(exc)) from exc
        return dict(row) if row is not None else None

    def run_query(self, query: str, params: Mapping[str, Any] | None = None) -> int:
        """Execute a mutating statement; returns the affected row count."""

        try:
            with self._unit() as conn:
                result: CursorResult = conn.execute(text(query), dict(params or {}))
                return int(result.rowcount)
        except _STATEMENT_ERRORS as exc:
            raise QueryError(message="Error executing query", details=str(exc)) from exc

    def scalar(self, statement: Executable) -> Any:
        try:
            with self._unit() as conn:
                return conn.scalar(statement)
        except _STATEMENT_ERRORS as exc:
            raise QueryError(message="Error executing query", details=str(exc)) from exc

    # -- draws ----------------------------------------------------------------

    def draw_exists(self, draw_id: int) -> bool:
        stmt = select(draws.c.CONCURSO).where(draws.c.CONCURSO == int(draw_id))
        return self.scalar(stmt) is not None

    def insert_draw(self, record: DrawRecord) -> None:
        try:
            with self._unit() as conn:
                conn.execute(insert(draws), record.to_params())
        except _STATEMENT_ERRORS as exc:
            raise QueryError(message=f"Error inserting draw {record.draw_id}", details=str(exc)) from exc

    def count_draws(self) -> int:
        return int(self.scalar(select(func.count()).select_from(draws)) or 0)

    def list_draws(self, limit: int, offset: int = 0) -> list[DrawRecord]:
        """Draws ordered by draw id, newest first. Page size is the caller's concern."""

        stmt = (
            select(draws)
            .order_by(draws.c.CONCURSO.desc())
            .limit(int(limit))
            .offset(int(offset))
        )
        try:
            with self._unit() as conn:
                rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as exc:
            logger.error("Error retrieving draws: %s", exc)
            raise QueryError(message="Failed to retrieve draws", details=str(exc)) from exc
        return [DrawRecord.from_mapping(row) for row in rows]

    def primary_numbers(self) -> list[tuple[int, ...]]:
        """The six primary numbers of every stored draw."""

        stmt = select(*(draws.c[name] for name in PRIMARY_COLUMNS))
        try:
            with self._unit() as conn:
                return [tuple(int(n) for n in row) for row in conn.execute(stmt)]
        except SQLAlchemyError as exc:
            raise QueryError(message="Failed to load draw numbers", details=str(exc)) from exc
