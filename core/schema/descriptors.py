"""Typed descriptors for interpreted schema definitions."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from core.schema.generators import storage_type_for_path
from core.types import FieldKind, StorageType


@dataclass(frozen=True)
class FieldDescriptor:
    """Interpreted form of one field definition."""

    @property
    def kind(self) -> FieldKind:
        raise NotImplementedError

    @property
    def storage_type(self) -> StorageType:
        raise NotImplementedError

    @property
    def is_boolean(self) -> bool:
        return self.storage_type == StorageType.BOOLEAN


@dataclass(frozen=True)
class PrimaryKeyField(FieldDescriptor):
    """Auto-incrementing integer key assigned by storage."""

    @property
    def kind(self) -> FieldKind:
        return FieldKind.PRIMARY_KEY

    @property
    def storage_type(self) -> StorageType:
        return StorageType.INTEGER


@dataclass(frozen=True)
class ForeignKeyField(FieldDescriptor):
    """Integer reference to ``target_table.target_column``."""

    target_table: str
    target_column: str

    @property
    def kind(self) -> FieldKind:
        return FieldKind.FOREIGN_KEY

    @property
    def storage_type(self) -> StorageType:
        return StorageType.INTEGER

    @property
    def reference(self) -> str:
        return f"{self.target_table}.{self.target_column}"


@dataclass(frozen=True)
class EnumField(FieldDescriptor):
    """One of a fixed, non-empty list of literal values."""

    values: tuple[Any, ...]

    @property
    def kind(self) -> FieldKind:
        return FieldKind.ENUM

    @property
    def storage_type(self) -> StorageType:
        return StorageType.TEXT


@dataclass(frozen=True)
class GeneratedField(FieldDescriptor):
    """Value produced by a registered generator."""

    generator_path: str
    options: Any = None

    @property
    def kind(self) -> FieldKind:
        return FieldKind.GENERATED

    @property
    def storage_type(self) -> StorageType:
        return storage_type_for_path(self.generator_path)


@dataclass(frozen=True)
class LiteralField(FieldDescriptor):
    """Constant value stored verbatim."""

    value: Any

    @property
    def kind(self) -> FieldKind:
        return FieldKind.LITERAL

    @property
    def storage_type(self) -> StorageType:
        return StorageType.TEXT


@dataclass(frozen=True)
class TableDescriptor:
    """A table with its ordered field descriptors and seed count."""

    name: str
    fields: Mapping[str, FieldDescriptor]
    seed_count: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def column_names(self) -> list[str]:
        return list(self.fields)

    @property
    def primary_key(self) -> str | None:
        """Name of the primary key field, if one is declared."""
        for name, descriptor in self.fields.items():
            if isinstance(descriptor, PrimaryKeyField):
                return name
        return None

    @property
    def foreign_keys(self) -> list[tuple[str, ForeignKeyField]]:
        return [
            (name, descriptor)
            for name, descriptor in self.fields.items()
            if isinstance(descriptor, ForeignKeyField)
        ]

    @property
    def boolean_fields(self) -> list[str]:
        return [
            name for name, descriptor in self.fields.items() if descriptor.is_boolean
        ]


@dataclass(frozen=True)
class SchemaDescriptor:
    """Ordered, immutable collection of table descriptors."""

    tables: tuple[TableDescriptor, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[TableDescriptor]:
        return iter(self.tables)

    def __len__(self) -> int:
        return len(self.tables)

    def __contains__(self, name: object) -> bool:
        return any(table.name == name for table in self.tables)

    @property
    def table_names(self) -> list[str]:
        return [table.name for table in self.tables]

    def table(self, name: str) -> TableDescriptor:
        """Look up a table by name.

        Raises:
            KeyError: If no table has that name
        """
        for table in self.tables:
            if table.name == name:
                return table
        raise KeyError(f"Table not found: {name}")

    def get(self, name: str) -> TableDescriptor | None:
        for table in self.tables:
            if table.name == name:
                return table
        return None
