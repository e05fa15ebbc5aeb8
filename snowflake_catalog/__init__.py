"""Snowflake table connector for a metadata catalog service."""

__version__ = "0.1.0"
