from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from snowflake_catalog.config import get_settings
from snowflake_catalog.services.snowflake_sql import SnowflakeConnectionParams, create_snowflake_engine
from snowflake_catalog.services.snowflake_table_connector import SnowflakeTableConnector


@lru_cache(maxsize=1)
def get_warehouse_connection_params() -> SnowflakeConnectionParams:
    settings = get_settings()
    account = settings.snowflake_account
    user = settings.snowflake_user
    password = settings.snowflake_password

    if not account or not user or not password:
        raise RuntimeError(
            "Snowflake warehouse configuration is missing. Set SNOWFLAKE_ACCOUNT, SNOWFLAKE_USER and"
            " SNOWFLAKE_PASSWORD, or provide WAREHOUSE_DATABASE_URL."
        )

    return SnowflakeConnectionParams(
        account=account,
        user=user.strip(),
        password=password,
        database=settings.snowflake_database,
        schema_name=settings.snowflake_schema,
        warehouse=settings.snowflake_warehouse,
        role=settings.snowflake_role,
    )


def _create_override_engine(url: str) -> Engine:
    if make_url(url).get_backend_name() == "sqlite":
        # One shared connection so attached schemas stay visible to every checkout.
        return create_engine(url, poolclass=StaticPool, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


@lru_cache(maxsize=1)
def get_warehouse_engine() -> Engine:
    """Engine for WAREHOUSE_DATABASE_URL when set, otherwise for the SNOWFLAKE_* account."""
    settings = get_settings()
    if settings.warehouse_database_url:
        return _create_override_engine(settings.warehouse_database_url)
    return create_snowflake_engine(
        get_warehouse_connection_params(),
        login_timeout=settings.snowflake_connect_timeout,
    )


def get_table_connector() -> SnowflakeTableConnector:
    return SnowflakeTableConnector.create(get_warehouse_engine())


def reset_warehouse_engine() -> None:
    # Helper for tests to force the engine to be rebuilt with new settings.
    if get_warehouse_engine.cache_info().currsize:
        get_warehouse_engine().dispose()
    get_warehouse_engine.cache_clear()
    get_warehouse_connection_params.cache_clear()
    get_settings.cache_clear()
