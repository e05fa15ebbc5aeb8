from __future__ import annotations

import logging
from contextlib import closing
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection

from snowflake_catalog.schemas import AuditInfo, QualifiedName, TableInfo
from snowflake_catalog.services.name_normalizer import normalize

logger = logging.getLogger(__name__)

COL_CREATED = "created"
COL_LAST_ALTERED = "last_altered"

# The database segment is bound to both table_catalog and table_schema.
SQL_GET_AUDIT_INFO = text(
    "select created, last_altered from information_schema.tables"
    " where table_catalog = :table_catalog and table_schema = :table_schema and table_name = :table_name"
)


class AuditLookupStatus(str, Enum):
    ENRICHED = "enriched"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class AuditLookup:
    status: AuditLookupStatus
    audit: Optional[AuditInfo] = None
    reason: Optional[str] = None


class AuditEnricher:
    """Attach creation/last-altered timestamps from the information schema to a table."""

    def enrich(self, connection: Connection, table_info: TableInfo) -> None:
        table_name = normalize(table_info.name)
        lookup = self.lookup(connection, table_name)

        if lookup.status is AuditLookupStatus.ENRICHED:
            table_info.audit = lookup.audit
        elif lookup.status is AuditLookupStatus.NOT_FOUND:
            logger.info("Ignoring. No audit info found for table %s", table_name)
        else:
            logger.info("Ignoring. Error getting the audit info for table %s: %s", table_name, lookup.reason)

    def lookup(self, connection: Connection, table_name: QualifiedName) -> AuditLookup:
        params = {
            "table_catalog": table_name.database_name,
            "table_schema": table_name.database_name,
            "table_name": table_name.table_name,
        }
        try:
            with closing(connection.execute(SQL_GET_AUDIT_INFO, params)) as result:
                row = result.first()
                if row is None:
                    return AuditLookup(AuditLookupStatus.NOT_FOUND)
                audit = AuditInfo(
                    created_date=_row_value(row, COL_CREATED),
                    last_modified_date=_row_value(row, COL_LAST_ALTERED),
                )
        except Exception as exc:  # noqa: BLE001 - any driver fault means no audit record
            return AuditLookup(AuditLookupStatus.FAILED, reason=str(exc) or exc.__class__.__name__)

        return AuditLookup(AuditLookupStatus.ENRICHED, audit=audit)


def _row_value(row, column: str):
    mapping = getattr(row, "_mapping", None)
    if mapping is not None:
        normalized = {str(key).lower(): value for key, value in mapping.items()}
        if column in normalized:
            return normalized[column]
    return getattr(row, column, None)
