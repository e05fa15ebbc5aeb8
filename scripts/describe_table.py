"""Print the catalog descriptor (columns and audit timestamps) of a warehouse table."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

_ROOT_DIR = Path(__file__).resolve().parents[1]
if str(_ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(_ROOT_DIR))

from sqlalchemy.exc import SQLAlchemyError  # noqa: E402

from snowflake_catalog.database import get_table_connector, get_warehouse_engine  # noqa: E402
from snowflake_catalog.logging_setup import configure_logging  # noqa: E402
from snowflake_catalog.schemas import ConnectorRequestContext, QualifiedName  # noqa: E402
from snowflake_catalog.services.exception_mapper import ConnectorError  # noqa: E402
from snowflake_catalog.services.snowflake_sql import count_visible_tables  # noqa: E402


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("name", help="Table as catalog/database/table (dots also accepted).")
    parser.add_argument(
        "--check-audit-access",
        action="store_true",
        help="Only count the tables of the name's database visible in information_schema.tables.",
    )
    return parser.parse_args(argv)


def _check_audit_access(name: QualifiedName) -> int:
    try:
        with get_warehouse_engine().connect() as connection:
            count = count_visible_tables(connection, name)
    except (RuntimeError, ConnectorError, SQLAlchemyError) as exc:
        print(f"Audit access check failed: {exc}", file=sys.stderr)
        return 1
    print(f"{count} table(s) of {name.catalog_name}/{name.database_name} visible in information_schema")
    return 0 if count else 1


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    configure_logging()
    args = _parse_args(argv)

    try:
        name = QualifiedName.from_string(args.name)
    except ValueError as exc:
        print(f"{args.name!r} is not a qualified name: {exc}", file=sys.stderr)
        return 2

    if args.check_audit_access:
        if name.database_name is None:
            print(f"{args.name} does not name a database.", file=sys.stderr)
            return 2
        return _check_audit_access(name)

    if not name.is_table_definition:
        print(f"{args.name} does not name a table.", file=sys.stderr)
        return 2

    try:
        table_info = get_table_connector().get(ConnectorRequestContext(), name)
    except (RuntimeError, ConnectorError, SQLAlchemyError) as exc:
        print(f"Lookup failed: {exc}", file=sys.stderr)
        return 1

    print(table_info.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
