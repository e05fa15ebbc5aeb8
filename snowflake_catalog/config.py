from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = Field("Snowflake Catalog Connector", alias="APP_NAME")
    warehouse_database_url: Optional[str] = Field(
        default=None,
        alias="WAREHOUSE_DATABASE_URL",
        description=(
            "Optional SQLAlchemy connection string override for the warehouse."
            " When unset, the connection string is composed from the SNOWFLAKE_* settings."
        ),
    )
    snowflake_account: Optional[str] = Field(
        default=None,
        alias="SNOWFLAKE_ACCOUNT",
        description="Account identifier (e.g. xy12345.eu-west-1).",
    )
    snowflake_user: Optional[str] = Field(default=None, alias="SNOWFLAKE_USER")
    snowflake_password: Optional[str] = Field(default=None, alias="SNOWFLAKE_PASSWORD")
    snowflake_database: Optional[str] = Field(
        default=None,
        alias="SNOWFLAKE_DATABASE",
        description="Default database used for the session.",
    )
    snowflake_schema: Optional[str] = Field(
        default=None,
        alias="SNOWFLAKE_SCHEMA",
        description="Default schema used for the session.",
    )
    snowflake_warehouse: Optional[str] = Field(
        default=None,
        alias="SNOWFLAKE_WAREHOUSE",
        description="Virtual warehouse that executes catalog queries.",
    )
    snowflake_role: Optional[str] = Field(default=None, alias="SNOWFLAKE_ROLE")
    snowflake_connect_timeout: int = Field(
        default=20,
        alias="SNOWFLAKE_CONNECT_TIMEOUT",
        description="Login timeout in seconds handed to the driver.",
        ge=1,
        le=600,
    )
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Python logging verbosity for connector modules (e.g. INFO, DEBUG).",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("snowflake_account", "snowflake_database", "snowflake_schema", "snowflake_warehouse", "snowflake_role")
    @classmethod
    def _strip_optional(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None


@lru_cache()
def get_settings() -> Settings:
    return Settings()
