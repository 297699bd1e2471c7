"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from sqlalchemy.engine import URL


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def resolve_database_url() -> str:
    """Resolve DB connection string.

    Priority:
      1) DATABASE_URL (explicit)
      2) Build from PG* env vars (common Postgres convention)
      3) Fallback to a local sqlite file at DATABASE_PATH
    """

    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    host = os.getenv("PGHOST")
    user = os.getenv("PGUSER")
    database = os.getenv("PGDATABASE")
    port_raw = os.getenv("PGPORT")

    if host and user and database:
        password = os.getenv("PGPASSWORD")
        sslmode = os.getenv("PGSSLMODE", "require")

        try:
            port = int(port_raw) if port_raw else 5432
        except ValueError:
            port = 5432

        query = {"sslmode": sslmode} if sslmode else {}
        url = URL.create(
            drivername="postgresql+psycopg2",
            username=user,
            password=password,
            host=host,
            port=port,
            database=database,
            query=query,
        )
        return url.render_as_string(hide_password=False)

    path = os.getenv("DATABASE_PATH", "./db/lotteries.db")
    return f"sqlite:///{path}"


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments."""

    APP_ENV: str = os.getenv("APP_ENV", "development")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret")
    TESTING: bool = False

    DATABASE_URL: str = resolve_database_url()

    # Paging for the draws listing
    MAX_PAGE_SIZE: int = _env_int("MAX_PAGE_SIZE", 100)
    DEFAULT_PAGE_SIZE: int = _env_int("DEFAULT_PAGE_SIZE", 10)

    # Source file + ingestion
    SOURCE_URL: str = os.getenv("SOURCE_URL", "")
    SAVE_DIRECTORY: str = os.getenv("SAVE_DIRECTORY", "./data")
    SOURCE_FILE_NAME: str = os.getenv("SOURCE_FILE_NAME", "draws.csv")
    OPERATION_MODE: str = os.getenv("OPERATION_MODE", "insertNewOnly")
    SOURCE_VERIFY_TLS: bool = _env_bool("SOURCE_VERIFY_TLS", True)
    FETCH_TIMEOUT: float = float(_env_int("FETCH_TIMEOUT", 30))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("LOG_FILE", "")
    LOG_FILE_MAX_BYTES: int = _env_int("LOG_FILE_MAX_BYTES", 5 * 1024 * 1024)
    LOG_FILE_BACKUP_COUNT: int = _env_int("LOG_FILE_BACKUP_COUNT", 5)


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


@dataclass(frozen=True)
class TestingConfig(BaseConfig):
    """Configuration used by the test-suite."""

    DEBUG: bool = False
    TESTING: bool = True
    LOG_FILE: str = ""


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
