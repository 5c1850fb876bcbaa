"""SQLite schema builder: table definitions to SQLAlchemy tables."""

from typing import Any

from sqlalchemy import Column, ForeignKey, Index, Integer, MetaData, Table, Text
from sqlalchemy.dialects import sqlite
from sqlalchemy.schema import CreateTable
from sqlalchemy.types import TypeEngine

from core.database.schema import ColumnDefinition, TableDefinition
from core.types import StorageType

# Booleans have no native SQLite type and are kept as 0/1 integers
COLUMN_TYPES: dict[StorageType, type[TypeEngine[Any]]] = {
    StorageType.INTEGER: Integer,
    StorageType.BOOLEAN: Integer,
    StorageType.TEXT: Text,
}


class SQLiteSchemaBuilder:
    """Builds SQLAlchemy ``Table`` objects for SQLite from table definitions."""

    def build_column(self, column: ColumnDefinition) -> Column[Any]:
        """Translate one column definition.

        Args:
            column: Column definition

        Returns:
            SQLAlchemy column
        """
        args: list[Any] = []
        if column.references:
            args.append(ForeignKey(column.references, ondelete=column.on_delete))

        return Column(
            column.name,
            COLUMN_TYPES[column.type](),
            *args,
            primary_key=column.primary_key,
            autoincrement=column.auto_increment if column.primary_key else False,
            nullable=column.nullable and not column.primary_key,
            unique=column.unique and not column.primary_key,
        )

    def build_table(self, metadata: MetaData, table: TableDefinition) -> Table:
        """Register a table on the metadata, columns in declaration order.

        Args:
            metadata: Metadata the table belongs to
            table: Table definition

        Returns:
            SQLAlchemy table
        """
        auto_increment = any(
            col.primary_key and col.auto_increment for col in table.columns
        )
        sa_table = Table(
            table.name,
            metadata,
            *(self.build_column(col) for col in table.columns),
            sqlite_autoincrement=auto_increment,
        )
        for column_name in table.indexes:
            Index(f"idx_{table.name}_{column_name}", sa_table.c[column_name])
        return sa_table

    def create_table_sql(self, table: Table) -> str:
        """Render the CREATE TABLE statement SQLite will receive."""
        return str(CreateTable(table).compile(dialect=sqlite.dialect())).strip()
