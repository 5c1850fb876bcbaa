"""Common type definitions for the mocklite system."""

from enum import Enum
from typing import Any, TypeAlias

RowType: TypeAlias = dict[str, Any]


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class FieldKind(str, Enum):
    """Kinds of interpreted field definitions."""

    PRIMARY_KEY = "primary_key"
    FOREIGN_KEY = "foreign_key"
    ENUM = "enum"
    GENERATED = "generated"
    LITERAL = "literal"


class StorageType(str, Enum):
    """Resolved storage types for schema columns.

    BOOLEAN is physically an INTEGER column holding 0/1.
    """

    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    TEXT = "TEXT"


class RelationKind(str, Enum):
    """Relation directions between two tables."""

    BELONGS_TO = "belongs_to"
    HAS_MANY = "has_many"
