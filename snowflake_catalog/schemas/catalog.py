from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

_NAME_SEPARATORS = re.compile(r"[/.]")


class QualifiedName(BaseModel):
    """Hierarchical identifier of a catalog object: catalog/database/table[/extra...]."""

    model_config = ConfigDict(frozen=True)

    catalog_name: str = Field(..., min_length=1)
    database_name: Optional[str] = None
    table_name: Optional[str] = None
    extra: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_hierarchy(self) -> "QualifiedName":
        if self.table_name is not None and self.database_name is None:
            raise ValueError("A table name requires a database name.")
        if self.extra and self.table_name is None:
            raise ValueError("Additional path segments require a table name.")
        return self

    @classmethod
    def of_catalog(cls, catalog_name: str) -> "QualifiedName":
        return cls(catalog_name=catalog_name)

    @classmethod
    def of_database(cls, catalog_name: str, database_name: str) -> "QualifiedName":
        return cls(catalog_name=catalog_name, database_name=database_name)

    @classmethod
    def of_table(cls, catalog_name: str, database_name: str, table_name: str) -> "QualifiedName":
        return cls(catalog_name=catalog_name, database_name=database_name, table_name=table_name)

    @classmethod
    def from_parts(cls, *parts: str) -> "QualifiedName":
        if not parts:
            raise ValueError("A qualified name needs at least a catalog segment.")
        catalog, *rest = parts
        database = rest[0] if len(rest) > 0 else None
        table = rest[1] if len(rest) > 1 else None
        return cls(catalog_name=catalog, database_name=database, table_name=table, extra=tuple(rest[2:]))

    @classmethod
    def from_string(cls, value: str) -> "QualifiedName":
        """Parse ``catalog/database/table`` (dots are accepted as separators too)."""
        parts = [part.strip() for part in _NAME_SEPARATORS.split(value or "") if part.strip()]
        return cls.from_parts(*parts)

    @property
    def parts(self) -> tuple[str, ...]:
        segments = [self.catalog_name, self.database_name, self.table_name]
        return tuple(segment for segment in segments if segment is not None) + self.extra

    @property
    def is_table_definition(self) -> bool:
        return self.table_name is not None and not self.extra

    @property
    def is_database_definition(self) -> bool:
        return self.database_name is not None and self.table_name is None

    def with_upper_case(self) -> "QualifiedName":
        # str.upper() is locale independent; no Turkish dotless-i surprises.
        return QualifiedName.from_parts(*(segment.upper() for segment in self.parts))

    def __str__(self) -> str:
        return "/".join(self.parts)


class AuditInfo(BaseModel):
    created_date: Optional[datetime] = None
    last_modified_date: Optional[datetime] = None


class FieldInfo(BaseModel):
    name: str
    type: str
    source_type: Optional[str] = None
    is_nullable: bool = True
    pos: int = 0
    comment: Optional[str] = None


class TableInfo(BaseModel):
    name: QualifiedName
    fields: list[FieldInfo] = Field(default_factory=list)
    audit: Optional[AuditInfo] = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class Sort(BaseModel):
    model_config = ConfigDict(frozen=True)

    sort_by: str = "name"
    order: SortOrder = SortOrder.ASC


class Pageable(BaseModel):
    model_config = ConfigDict(frozen=True)

    offset: int = Field(0, ge=0)
    limit: Optional[int] = Field(None, ge=0)

    def apply(self, items: list) -> list:
        if self.limit is None:
            return items[self.offset :]
        return items[self.offset : self.offset + self.limit]


class ConnectorRequestContext(BaseModel):
    """Per-request context handed through every connector call without inspection."""

    model_config = ConfigDict(frozen=True)

    request_id: Optional[str] = None
    user_name: Optional[str] = None
    timestamp: Optional[datetime] = None
