"""SQLAlchemy engine + draw-store management.

Uses a store-per-request pattern: one connection is opened before each
request and closed in teardown.
"""

from __future__ import annotations

from flask import Flask, g
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url

from lottostats.store import DrawStore


def _enable_sqlite_transactional_ddl(engine: Engine) -> None:
    # pysqlite commits implicitly before DDL; take over BEGIN so that
    # drop + create + insert share one transaction.

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record) -> None:  # type: ignore[no-untyped-def]
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn) -> None:  # type: ignore[no-untyped-def]
        conn.exec_driver_sql("BEGIN")


def create_store_engine(database_url: str) -> Engine:
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        engine = create_engine(url)
        _enable_sqlite_transactional_ddl(engine)
        return engine

    return create_engine(url, pool_pre_ping=True)


def init_db(app: Flask) -> None:
    """Create the engine, make sure the draws table exists, open stores per request."""

    engine = create_store_engine(str(app.config["DATABASE_URL"]))

    with DrawStore(engine) as store:
        store.create_table_if_not_exists()

    app.extensions["engine"] = engine

    @app.before_request
    def _open_store() -> None:
        store = DrawStore(engine)
        store.connect()
        g.store = store  # type: ignore[attr-defined]

    @app.teardown_request
    def _close_store(exc: BaseException | None) -> None:
        store: DrawStore | None = g.pop("store", None)
        if store is None:
            return
        store.close()


def get_store() -> DrawStore:
    """Get the current request's draw store."""

    store: DrawStore | None = getattr(g, "store", None)
    if store is None:
        raise RuntimeError("Draw store not initialized")
    return store
