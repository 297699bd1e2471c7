"""Custom exceptions for centralized error handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(eq=False)
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None

    def __str__(self) -> str:
        return self.message


class ValidationError(AppError):
    """Input validation error."""

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


class InvalidArgument(ValidationError):
    """An analysis was asked for with arguments outside its domain."""

    def __init__(self, message: str = "Invalid argument", details: Any | None = None) -> None:
        super().__init__(message=message, details=details)
        self.code = "invalid_argument"


class StoreError(AppError):
    """Failure inside the draw store or the ingestion pipeline.

    Surfaces as a generic server-side failure; ``message`` carries the
    context for logs only.
    """

    def __init__(self, code: str, message: str, details: Any | None = None) -> None:
        super().__init__(code=code, message=message, status_code=500, details=details)


class StoreConnectionError(StoreError):
    """The storage backend could not be opened or created."""

    def __init__(self, message: str = "Failed to open database connection", details: Any | None = None) -> None:
        super().__init__(code="connection_error", message=message, details=details)


class SchemaError(StoreError):
    """Table creation or verification failed."""

    def __init__(self, message: str = "Schema error", details: Any | None = None) -> None:
        super().__init__(code="schema_error", message=message, details=details)


class IngestionError(StoreError):
    """Parsing, coercion or the ingestion transaction failed."""

    def __init__(self, message: str = "Ingestion failed", details: Any | None = None) -> None:
        super().__init__(code="ingestion_error", message=message, details=details)


class QueryError(StoreError):
    """A read or write statement failed."""

    def __init__(self, message: str = "Query failed", details: Any | None = None) -> None:
        super().__init__(code="query_error", message=message, details=details)
