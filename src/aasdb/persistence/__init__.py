"""Persistence layer for flattened AAS records.

This module provides:
- SQLAlchemy ORM models of the record tables
- Async PostgreSQL engine and session factory
- Record sinks that commit one batch per document
"""

from aasdb.persistence.db import close_db, get_engine, init_db, session_context
from aasdb.persistence.sink import DatabaseSink, MemorySink, RecordSink
from aasdb.persistence.tables import (
    AasTable,
    Base,
    ConceptDescriptionTable,
    EnvTable,
    SubmodelElementTable,
    SubmodelTable,
)

__all__ = [
    # DB
    "close_db",
    "get_engine",
    "init_db",
    "session_context",
    # Sinks
    "DatabaseSink",
    "MemorySink",
    "RecordSink",
    # Tables
    "AasTable",
    "Base",
    "ConceptDescriptionTable",
    "EnvTable",
    "SubmodelElementTable",
    "SubmodelTable",
]
