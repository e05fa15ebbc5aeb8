from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import CompileError, SQLAlchemyError

from snowflake_catalog.schemas import (
    ConnectorRequestContext,
    FieldInfo,
    Pageable,
    QualifiedName,
    Sort,
    SortOrder,
    TableInfo,
)
from snowflake_catalog.services.exception_mapper import (
    ConnectorError,
    ExceptionMapper,
    JdbcExceptionMapper,
    TableNotFoundError,
)

logger = logging.getLogger(__name__)

DetailsPopulator = Callable[[Connection, TableInfo], None]


@runtime_checkable
class CatalogTableService(Protocol):
    """Table operations a catalog connector exposes."""

    def get(self, context: ConnectorRequestContext, name: QualifiedName) -> TableInfo: ...

    def list(
        self,
        context: ConnectorRequestContext,
        name: QualifiedName,
        prefix: Optional[QualifiedName] = None,
        sort: Optional[Sort] = None,
        pageable: Optional[Pageable] = None,
    ) -> list[TableInfo]: ...

    def list_names(
        self,
        context: ConnectorRequestContext,
        name: QualifiedName,
        prefix: Optional[QualifiedName] = None,
        sort: Optional[Sort] = None,
        pageable: Optional[Pageable] = None,
    ) -> list[QualifiedName]: ...

    def exists(self, context: ConnectorRequestContext, name: QualifiedName) -> bool: ...

    def rename(self, context: ConnectorRequestContext, old_name: QualifiedName, new_name: QualifiedName) -> None: ...

    def delete(self, context: ConnectorRequestContext, name: QualifiedName) -> None: ...


class TypeConverter(Protocol):
    def to_canonical_type(self, sql_type: Any) -> str: ...


class SqlTypeConverter:
    """Render the reflected SQLAlchemy type as the catalog type string."""

    def to_canonical_type(self, sql_type: Any) -> str:
        return _render_sql_type(sql_type) or "UNKNOWN"


def _render_sql_type(sql_type: Any) -> Optional[str]:
    if sql_type is None:
        return None
    try:
        return str(sql_type)
    except CompileError:  # dialect-specific types may not render on the default dialect
        return sql_type.__class__.__name__.upper()


class JdbcCatalogTableService:
    """Generic table service over an SQLAlchemy engine.

    ``details_populator`` is called with the open connection for every table
    descriptor built by ``get`` and ``list`` before it is returned.
    """

    def __init__(
        self,
        engine: Engine,
        type_converter: Optional[TypeConverter] = None,
        exception_mapper: Optional[ExceptionMapper] = None,
        *,
        details_populator: Optional[DetailsPopulator] = None,
    ) -> None:
        self.engine = engine
        self.type_converter = type_converter or SqlTypeConverter()
        self.exception_mapper = exception_mapper or JdbcExceptionMapper()
        self._details_populator = details_populator

    # Public API -----------------------------------------------------------------

    def get(self, context: ConnectorRequestContext, name: QualifiedName) -> TableInfo:
        logger.debug("Get table %s (request %s)", name, context.request_id)
        try:
            with self.engine.connect() as connection:
                return self._build_table_info(connection, name)
        except SQLAlchemyError as exc:
            raise self.exception_mapper.to_connector_error(exc, name) from exc

    def list(
        self,
        context: ConnectorRequestContext,
        name: QualifiedName,
        prefix: Optional[QualifiedName] = None,
        sort: Optional[Sort] = None,
        pageable: Optional[Pageable] = None,
    ) -> list[TableInfo]:
        logger.debug("List tables in %s (request %s)", name, context.request_id)
        try:
            with self.engine.connect() as connection:
                table_names = self._table_names(connection, name, prefix, sort, pageable)
                return [self._build_table_info(connection, table_name) for table_name in table_names]
        except SQLAlchemyError as exc:
            raise self.exception_mapper.to_connector_error(exc, name) from exc

    def list_names(
        self,
        context: ConnectorRequestContext,
        name: QualifiedName,
        prefix: Optional[QualifiedName] = None,
        sort: Optional[Sort] = None,
        pageable: Optional[Pageable] = None,
    ) -> list[QualifiedName]:
        logger.debug("List table names in %s (request %s)", name, context.request_id)
        try:
            with self.engine.connect() as connection:
                return self._table_names(connection, name, prefix, sort, pageable)
        except SQLAlchemyError as exc:
            raise self.exception_mapper.to_connector_error(exc, name) from exc

    def exists(self, context: ConnectorRequestContext, name: QualifiedName) -> bool:
        logger.debug("Check table %s exists (request %s)", name, context.request_id)
        try:
            with self.engine.connect() as connection:
                return inspect(connection).has_table(name.table_name, schema=name.database_name)
        except SQLAlchemyError as exc:
            raise self.exception_mapper.to_connector_error(exc, name) from exc

    def rename(self, context: ConnectorRequestContext, old_name: QualifiedName, new_name: QualifiedName) -> None:
        logger.debug("Rename table %s to %s (request %s)", old_name, new_name, context.request_id)
        statement = f"ALTER TABLE {self._qualified_sql(old_name)} RENAME TO {self._qualified_sql(new_name)}"
        try:
            with self.engine.begin() as connection:
                connection.execute(text(statement))
        except SQLAlchemyError as exc:
            raise self.exception_mapper.to_connector_error(exc, old_name) from exc

    def delete(self, context: ConnectorRequestContext, name: QualifiedName) -> None:
        logger.debug("Drop table %s (request %s)", name, context.request_id)
        statement = f"DROP TABLE {self._qualified_sql(name)}"
        try:
            with self.engine.begin() as connection:
                connection.execute(text(statement))
        except SQLAlchemyError as exc:
            raise self.exception_mapper.to_connector_error(exc, name) from exc

    # Internal helpers -----------------------------------------------------------

    def _build_table_info(self, connection: Connection, name: QualifiedName) -> TableInfo:
        inspector = inspect(connection)
        if not inspector.has_table(name.table_name, schema=name.database_name):
            raise TableNotFoundError(f"Table {name} does not exist", name)

        fields = [
            FieldInfo(
                name=column.get("name", ""),
                type=self.type_converter.to_canonical_type(column.get("type")),
                source_type=_render_sql_type(column.get("type")),
                is_nullable=column.get("nullable", True),
                pos=position,
                comment=column.get("comment"),
            )
            for position, column in enumerate(
                inspector.get_columns(name.table_name, schema=name.database_name)
            )
        ]
        table_info = TableInfo(name=name, fields=fields)
        if self._details_populator is not None:
            self._details_populator(connection, table_info)
        return table_info

    def _table_names(
        self,
        connection: Connection,
        name: QualifiedName,
        prefix: Optional[QualifiedName],
        sort: Optional[Sort],
        pageable: Optional[Pageable],
    ) -> list[QualifiedName]:
        if name.database_name is None:
            raise ConnectorError(f"Listing tables requires a database name, got {name}", name)

        table_names = inspect(connection).get_table_names(schema=name.database_name)
        if prefix is not None and prefix.table_name:
            table_names = [table for table in table_names if table.startswith(prefix.table_name)]

        reverse = sort is not None and sort.order is SortOrder.DESC
        table_names = sorted(table_names, reverse=reverse)
        if pageable is not None:
            table_names = pageable.apply(table_names)

        return [QualifiedName.of_table(name.catalog_name, name.database_name, table) for table in table_names]

    def _qualified_sql(self, name: QualifiedName) -> str:
        if name.table_name is None:
            raise ConnectorError(f"Expected a table name, got {name}", name)
        preparer = self.engine.dialect.identifier_preparer
        return f"{preparer.quote(name.database_name)}.{preparer.quote(name.table_name)}"
