from __future__ import annotations

from typing import Optional, Protocol

from sqlalchemy.exc import DBAPIError, NoSuchTableError, SQLAlchemyError

from snowflake_catalog.schemas import QualifiedName


class ConnectorError(Exception):
    """Raised when a catalog operation against the warehouse fails."""

    def __init__(self, message: str, name: Optional[QualifiedName] = None) -> None:
        super().__init__(message)
        self.name = name


class TableNotFoundError(ConnectorError):
    """Raised when the addressed table does not exist or is not visible."""


class DatabaseNotFoundError(ConnectorError):
    """Raised when the addressed database/schema does not exist or is not visible."""


class TableAlreadyExistsError(ConnectorError):
    """Raised when a rename targets a table that already exists."""


class ExceptionMapper(Protocol):
    def to_connector_error(self, exc: SQLAlchemyError, name: QualifiedName) -> ConnectorError: ...


def _driver_message(exc: SQLAlchemyError) -> str:
    return str(getattr(exc, "orig", None) or exc) or "Unknown error"


class JdbcExceptionMapper:
    """Generic translation of SQLAlchemy failures into connector errors."""

    def to_connector_error(self, exc: SQLAlchemyError, name: QualifiedName) -> ConnectorError:
        if isinstance(exc, NoSuchTableError):
            return TableNotFoundError(f"Table {name} does not exist", name)
        return ConnectorError(f"Catalog operation on {name} failed: {_driver_message(exc)}", name)


# Snowflake error numbers surfaced on the DBAPI exception as ``errno``.
SNOWFLAKE_OBJECT_ALREADY_EXISTS = 2002
SNOWFLAKE_OBJECT_DOES_NOT_EXIST = 2003


class SnowflakeExceptionMapper(JdbcExceptionMapper):
    """Recognises the warehouse's error numbers on top of the generic mapping."""

    def to_connector_error(self, exc: SQLAlchemyError, name: QualifiedName) -> ConnectorError:
        errno = _error_number(exc)
        if errno == SNOWFLAKE_OBJECT_DOES_NOT_EXIST:
            if name.table_name is None:
                return DatabaseNotFoundError(f"Database {name} does not exist or not authorized", name)
            return TableNotFoundError(f"Table {name} does not exist or not authorized", name)
        if errno == SNOWFLAKE_OBJECT_ALREADY_EXISTS:
            return TableAlreadyExistsError(f"Table {name} already exists", name)
        return super().to_connector_error(exc, name)


def _error_number(exc: SQLAlchemyError) -> Optional[int]:
    if not isinstance(exc, DBAPIError):
        return None
    value = getattr(exc.orig, "errno", None)
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None
