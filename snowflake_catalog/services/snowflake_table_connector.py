from __future__ import annotations

from typing import Optional

from sqlalchemy.engine import Connection, Engine

from snowflake_catalog.schemas import (
    ConnectorRequestContext,
    Pageable,
    QualifiedName,
    Sort,
    TableInfo,
)
from snowflake_catalog.services.audit_enricher import AuditEnricher
from snowflake_catalog.services.exception_mapper import ExceptionMapper, SnowflakeExceptionMapper
from snowflake_catalog.services.name_normalizer import normalize
from snowflake_catalog.services.table_service import (
    CatalogTableService,
    JdbcCatalogTableService,
    TypeConverter,
)


class SnowflakeTableConnector:
    """Table service for Snowflake.

    Every name handed to the wrapped service is converted to the warehouse's
    uppercase form first. Errors raised by the wrapped service propagate
    unchanged; only audit enrichment is best effort.
    """

    def __init__(self, service: CatalogTableService, enricher: Optional[AuditEnricher] = None) -> None:
        self._service = service
        self._enricher = enricher or AuditEnricher()

    @classmethod
    def create(
        cls,
        engine: Engine,
        type_converter: Optional[TypeConverter] = None,
        exception_mapper: Optional[ExceptionMapper] = None,
    ) -> "SnowflakeTableConnector":
        enricher = AuditEnricher()
        service = JdbcCatalogTableService(
            engine,
            type_converter,
            exception_mapper or SnowflakeExceptionMapper(),
            details_populator=enricher.enrich,
        )
        return cls(service, enricher)

    def delete(self, context: ConnectorRequestContext, name: QualifiedName) -> None:
        self._service.delete(context, normalize(name))

    def get(self, context: ConnectorRequestContext, name: QualifiedName) -> TableInfo:
        return self._service.get(context, normalize(name))

    def list(
        self,
        context: ConnectorRequestContext,
        name: QualifiedName,
        prefix: Optional[QualifiedName] = None,
        sort: Optional[Sort] = None,
        pageable: Optional[Pageable] = None,
    ) -> list[TableInfo]:
        return self._service.list(context, normalize(name), prefix, sort, pageable)

    def list_names(
        self,
        context: ConnectorRequestContext,
        name: QualifiedName,
        prefix: Optional[QualifiedName] = None,
        sort: Optional[Sort] = None,
        pageable: Optional[Pageable] = None,
    ) -> list[QualifiedName]:
        return self._service.list_names(context, normalize(name), prefix, sort, pageable)

    def rename(self, context: ConnectorRequestContext, old_name: QualifiedName, new_name: QualifiedName) -> None:
        self._service.rename(context, normalize(old_name), normalize(new_name))

    def exists(self, context: ConnectorRequestContext, name: QualifiedName) -> bool:
        return self._service.exists(context, normalize(name))

    def populate_details(self, connection: Connection, table_info: TableInfo) -> None:
        """Attach audit timestamps to ``table_info``; never raises."""
        self._enricher.enrich(connection, table_info)
