import logging
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from snowflake_catalog.schemas import QualifiedName, TableInfo
from snowflake_catalog.services.audit_enricher import AuditEnricher, AuditLookupStatus

ENRICHER_LOGGER = "snowflake_catalog.services.audit_enricher"


def _connection_returning(row) -> tuple[MagicMock, MagicMock]:
    result = MagicMock()
    result.first.return_value = row
    connection = MagicMock()
    connection.execute.return_value = result
    return connection, result


def _audit_row(created: datetime, last_altered: datetime) -> SimpleNamespace:
    return SimpleNamespace(_mapping={"CREATED": created, "LAST_ALTERED": last_altered})


def _enricher_records(caplog) -> list[logging.LogRecord]:
    return [record for record in caplog.records if record.name == ENRICHER_LOGGER]


def test_enrich_sets_audit_from_information_schema_row() -> None:
    created = datetime(2020, 1, 1)
    last_altered = datetime(2021, 6, 15)
    connection, _ = _connection_returning(_audit_row(created, last_altered))
    table_info = TableInfo(name=QualifiedName.of_table("CAT", "DB", "T1"))

    AuditEnricher().enrich(connection, table_info)

    assert table_info.audit is not None
    assert table_info.audit.created_date == created
    assert table_info.audit.last_modified_date == last_altered


def test_enrich_binds_database_segment_to_catalog_and_schema() -> None:
    connection, _ = _connection_returning(None)
    table_info = TableInfo(name=QualifiedName.of_table("cat", "db", "t1"))

    AuditEnricher().enrich(connection, table_info)

    statement, params = connection.execute.call_args.args
    assert str(statement) == (
        "select created, last_altered from information_schema.tables"
        " where table_catalog = :table_catalog and table_schema = :table_schema and table_name = :table_name"
    )
    assert params == {"table_catalog": "DB", "table_schema": "DB", "table_name": "T1"}
    assert connection.execute.call_count == 1


def test_enrich_without_row_leaves_audit_absent_and_logs(caplog) -> None:
    caplog.set_level(logging.INFO, logger="snowflake_catalog")
    connection, result = _connection_returning(None)
    table_info = TableInfo(name=QualifiedName.of_table("CAT", "DB", "T1"))

    AuditEnricher().enrich(connection, table_info)

    assert table_info.audit is None
    records = _enricher_records(caplog)
    assert len(records) == 1
    assert records[0].levelno == logging.INFO
    assert "CAT/DB/T1" in records[0].getMessage()
    result.close.assert_called_once()


def test_enrich_swallows_connectivity_error_and_logs_once(caplog) -> None:
    caplog.set_level(logging.INFO, logger="snowflake_catalog")
    connection = MagicMock()
    connection.execute.side_effect = OperationalError(
        "select created, last_altered", {}, Exception("network unreachable")
    )
    table_info = TableInfo(name=QualifiedName.of_table("CAT", "DB", "T1"))

    AuditEnricher().enrich(connection, table_info)

    assert table_info.audit is None
    records = _enricher_records(caplog)
    assert len(records) == 1
    assert records[0].levelno == logging.INFO
    assert "CAT/DB/T1" in records[0].getMessage()
    assert "network unreachable" in records[0].getMessage()


def test_result_is_closed_when_fetch_fails() -> None:
    connection, result = _connection_returning(None)
    result.first.side_effect = RuntimeError("cursor reset by peer")
    table_info = TableInfo(name=QualifiedName.of_table("CAT", "DB", "T1"))

    AuditEnricher().enrich(connection, table_info)

    assert table_info.audit is None
    result.close.assert_called_once()


def test_result_is_closed_after_successful_lookup() -> None:
    connection, result = _connection_returning(_audit_row(datetime(2020, 1, 1), datetime(2020, 2, 1)))

    lookup = AuditEnricher().lookup(connection, QualifiedName.of_table("CAT", "DB", "T1"))

    assert lookup.status is AuditLookupStatus.ENRICHED
    result.close.assert_called_once()


def test_lookup_reports_failure_reason() -> None:
    connection = MagicMock()
    connection.execute.side_effect = PermissionError("insufficient privileges")

    lookup = AuditEnricher().lookup(connection, QualifiedName.of_table("CAT", "DB", "T1"))

    assert lookup.status is AuditLookupStatus.FAILED
    assert lookup.audit is None
    assert lookup.reason == "insufficient privileges"


def test_enrich_accepts_lowercase_result_columns() -> None:
    row = SimpleNamespace(_mapping={"created": datetime(2019, 5, 1), "last_altered": None})
    connection, _ = _connection_returning(row)
    table_info = TableInfo(name=QualifiedName.of_table("CAT", "DB", "T1"))

    AuditEnricher().enrich(connection, table_info)

    assert table_info.audit is not None
    assert table_info.audit.created_date == datetime(2019, 5, 1)
    assert table_info.audit.last_modified_date is None
