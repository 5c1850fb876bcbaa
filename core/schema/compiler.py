"""Schema compiler: config to descriptors, descriptors to physical tables."""

import re
from dataclasses import dataclass

from sqlalchemy import MetaData, Table
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from core.constants import RESERVED_TABLE_NAMES
from core.database.engine import reset_database
from core.database.schema import ColumnDefinition, TableDefinition
from core.database.schema_builder import SQLiteSchemaBuilder
from core.exceptions import ConfigError, IntegrityError
from core.log import get_logger
from core.models.config import MockliteConfig
from core.schema.descriptors import (
    ForeignKeyField,
    PrimaryKeyField,
    SchemaDescriptor,
    TableDescriptor,
)
from core.schema.interpreter import interpret

logger = get_logger(__name__)

TABLE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _validate_table_name(name: str) -> None:
    if not TABLE_NAME_PATTERN.match(name):
        raise ConfigError(
            f"Invalid table name {name!r}: use letters, digits and underscores"
        )
    if name in RESERVED_TABLE_NAMES:
        raise ConfigError(f"Table name {name!r} collides with a reserved route")


def _validate_foreign_keys(schema: SchemaDescriptor) -> None:
    for table in schema:
        for field_name, fk in table.foreign_keys:
            target = schema.get(fk.target_table)
            if target is None:
                raise IntegrityError(
                    f"Field '{table.name}.{field_name}' references undefined "
                    f"table '{fk.target_table}'"
                )
            if fk.target_column not in target.fields:
                raise IntegrityError(
                    f"Field '{table.name}.{field_name}' references undefined "
                    f"column '{fk.reference}'"
                )
            # SQLite rejects every write through a key to a non-unique column
            if fk.target_column != target.primary_key:
                raise IntegrityError(
                    f"Field '{table.name}.{field_name}' must reference the primary "
                    f"key of '{fk.target_table}', not '{fk.reference}'"
                )


def build_schema(config: MockliteConfig) -> SchemaDescriptor:
    """Interpret and validate every table declared in the config.

    Args:
        config: Validated config file

    Returns:
        Immutable schema descriptor in declaration order

    Raises:
        ConfigError: On malformed definitions, duplicate or reserved names
        IntegrityError: On foreign keys to undeclared tables or columns
    """
    tables: list[TableDescriptor] = []
    seen: set[str] = set()

    for table_config in config.tables:
        name = table_config.table
        _validate_table_name(name)
        if name in seen:
            raise ConfigError(f"Duplicate table name: {name}")
        seen.add(name)

        fields = {}
        for field_name, definition in table_config.fields.items():
            try:
                fields[field_name] = interpret(definition)
            except ConfigError as e:
                raise ConfigError(f"Table '{name}', field '{field_name}': {e}") from e

        primary_keys = [f for f, d in fields.items() if isinstance(d, PrimaryKeyField)]
        if len(primary_keys) > 1:
            raise ConfigError(
                f"Table '{name}' declares more than one primary key: "
                f"{', '.join(primary_keys)}"
            )

        tables.append(
            TableDescriptor(
                name=name, fields=fields, seed_count=table_config.seed or 0
            )
        )

    schema = SchemaDescriptor(tables=tuple(tables))
    _validate_foreign_keys(schema)
    return schema


def table_definition(table: TableDescriptor) -> TableDefinition:
    """Derive the physical column layout of one table."""
    columns = []
    indexes = []
    for name, descriptor in table.fields.items():
        if isinstance(descriptor, PrimaryKeyField):
            columns.append(
                ColumnDefinition(
                    name=name,
                    type=descriptor.storage_type,
                    primary_key=True,
                    auto_increment=True,
                )
            )
        elif isinstance(descriptor, ForeignKeyField):
            columns.append(
                ColumnDefinition(
                    name=name,
                    type=descriptor.storage_type,
                    references=descriptor.reference,
                    on_delete="CASCADE",
                )
            )
            indexes.append(name)
        else:
            columns.append(ColumnDefinition(name=name, type=descriptor.storage_type))
    return TableDefinition(name=table.name, columns=columns, indexes=indexes)


@dataclass(frozen=True)
class CompiledSchema:
    """Schema descriptor plus its SQLAlchemy tables bound to one metadata."""

    descriptor: SchemaDescriptor
    metadata: MetaData
    tables: dict[str, Table]

    def table(self, name: str) -> Table:
        """Look up a compiled table.

        Raises:
            KeyError: If no table has that name
        """
        try:
            return self.tables[name]
        except KeyError:
            raise KeyError(f"Table not found: {name}") from None

    def __contains__(self, name: object) -> bool:
        return name in self.tables


def build_metadata(schema: SchemaDescriptor) -> CompiledSchema:
    """Build SQLAlchemy tables for the schema without touching the database."""
    builder = SQLiteSchemaBuilder()
    metadata = MetaData()
    tables = {
        table.name: builder.build_table(metadata, table_definition(table))
        for table in schema
    }
    return CompiledSchema(descriptor=schema, metadata=metadata, tables=tables)


def compile_schema(schema: SchemaDescriptor, engine: Engine) -> CompiledSchema:
    """Replace the physical schema with one matching the descriptor.

    Existing tables are dropped, declared or not, so every start yields a
    store identical to the current config.

    Raises:
        ConfigError: If the engine rejects any table
    """
    compiled = build_metadata(schema)
    try:
        reset_database(engine, compiled.metadata)
    except SQLAlchemyError as e:
        raise ConfigError(f"Failed to create schema: {e}") from e

    logger.info(f"Compiled schema with {len(compiled.tables)} tables")
    return compiled
