from snowflake_catalog.schemas.catalog import (
    AuditInfo,
    ConnectorRequestContext,
    FieldInfo,
    Pageable,
    QualifiedName,
    Sort,
    SortOrder,
    TableInfo,
)

__all__ = [
    "AuditInfo",
    "ConnectorRequestContext",
    "FieldInfo",
    "Pageable",
    "QualifiedName",
    "Sort",
    "SortOrder",
    "TableInfo",
]
