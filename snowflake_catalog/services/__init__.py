from snowflake_catalog.services.audit_enricher import AuditEnricher, AuditLookup, AuditLookupStatus
from snowflake_catalog.services.exception_mapper import (
    ConnectorError,
    DatabaseNotFoundError,
    JdbcExceptionMapper,
    SnowflakeExceptionMapper,
    TableAlreadyExistsError,
    TableNotFoundError,
)
from snowflake_catalog.services.name_normalizer import normalize
from snowflake_catalog.services.snowflake_table_connector import SnowflakeTableConnector
from snowflake_catalog.services.table_service import (
    CatalogTableService,
    JdbcCatalogTableService,
    SqlTypeConverter,
)

__all__ = [
	"AuditEnricher",
	"AuditLookup",
	"AuditLookupStatus",
	"CatalogTableService",
	"ConnectorError",
	"DatabaseNotFoundError",
	"JdbcCatalogTableService",
	"JdbcExceptionMapper",
	"SnowflakeExceptionMapper",
	"SnowflakeTableConnector",
	"SqlTypeConverter",
	"TableAlreadyExistsError",
	"TableNotFoundError",
	"normalize",
]
