import os
import sys
from pathlib import Path

from collections.abc import Generator
from typing import Any, Callable, Optional

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

TEST_DATABASE_URL = "sqlite://"
os.environ.setdefault("WAREHOUSE_DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("LOG_LEVEL", "INFO")

from snowflake_catalog.schemas import ConnectorRequestContext, QualifiedName, TableInfo  # noqa: E402


def _create_testing_engine() -> Engine:
    return create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture()
def warehouse_engine() -> Generator[Engine, None, None]:
    engine = _create_testing_engine()
    # Attached under an uppercase name so it behaves like a warehouse schema.
    with engine.connect() as connection:
        connection.execute(text("ATTACH DATABASE ':memory:' AS \"SALES\""))
        connection.execute(
            text('CREATE TABLE "SALES"."ORDERS" (id INTEGER NOT NULL, amount NUMERIC(10, 2), note VARCHAR(50))')
        )
        connection.execute(text('CREATE TABLE "SALES"."ORDER_ITEMS" (order_id INTEGER NOT NULL, sku VARCHAR(20))'))
        connection.execute(text('CREATE TABLE "SALES"."CUSTOMERS" (id INTEGER NOT NULL, name VARCHAR(100))'))
        connection.commit()
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def request_context() -> ConnectorRequestContext:
    return ConnectorRequestContext(request_id="req-1", user_name="catalog-tests")


class RecordingTableService:
    """In-memory table service that records every call it receives."""

    def __init__(
        self,
        *,
        details_populator: Optional[Callable[[Any, TableInfo], None]] = None,
        connection: Any = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.details_populator = details_populator
        self.connection = connection
        self.error = error

    def _record(self, *call: Any) -> None:
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    def _table_info(self, name: QualifiedName) -> TableInfo:
        table_info = TableInfo(name=name)
        if self.details_populator is not None:
            self.details_populator(self.connection, table_info)
        return table_info

    def get(self, context, name):
        self._record("get", context, name)
        return self._table_info(name)

    def list(self, context, name, prefix=None, sort=None, pageable=None):
        self._record("list", context, name, prefix, sort, pageable)
        return [self._table_info(QualifiedName.of_table(name.catalog_name, name.database_name, "T1"))]

    def list_names(self, context, name, prefix=None, sort=None, pageable=None):
        self._record("list_names", context, name, prefix, sort, pageable)
        return [QualifiedName.of_table(name.catalog_name, name.database_name, "T1")]

    def exists(self, context, name):
        self._record("exists", context, name)
        return True

    def rename(self, context, old_name, new_name):
        self._record("rename", context, old_name, new_name)

    def delete(self, context, name):
        self._record("delete", context, name)


@pytest.fixture()
def recording_service() -> RecordingTableService:
    return RecordingTableService()
