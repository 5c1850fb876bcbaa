"""Core database functionality."""

from .engine import (
    create_database_engine,
    create_database_tables,
    drop_database_tables,
    reset_database,
)
from .schema import ColumnDefinition, TableDefinition
from .schema_builder import SQLiteSchemaBuilder

__all__ = [
    "ColumnDefinition",
    "SQLiteSchemaBuilder",
    "TableDefinition",
    "create_database_engine",
    "create_database_tables",
    "drop_database_tables",
    "reset_database",
]
