"""SQLAlchemy adapter package for labelcheck."""

from __future__ import annotations

from .mappings import TABLE_BY_DATASET, create_all_tables, metadata
from .store import SqlAlchemyReferenceStore

__all__ = [
    "TABLE_BY_DATASET",
    "SqlAlchemyReferenceStore",
    "create_all_tables",
    "metadata",
]
