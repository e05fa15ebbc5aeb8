from __future__ import annotations

from snowflake_catalog.schemas import QualifiedName


def normalize(name: QualifiedName) -> QualifiedName:
    """Return the warehouse's canonical (uppercase) form of ``name``."""
    return name.with_upper_case()

