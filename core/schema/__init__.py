"""Schema interpretation and compilation."""

from .compiler import CompiledSchema, build_schema, compile_schema
from .descriptors import (
    EnumField,
    FieldDescriptor,
    ForeignKeyField,
    GeneratedField,
    LiteralField,
    PrimaryKeyField,
    SchemaDescriptor,
    TableDescriptor,
)
from .interpreter import interpret

__all__ = [
    "CompiledSchema",
    "EnumField",
    "FieldDescriptor",
    "ForeignKeyField",
    "GeneratedField",
    "LiteralField",
    "PrimaryKeyField",
    "SchemaDescriptor",
    "TableDescriptor",
    "build_schema",
    "compile_schema",
    "interpret",
]
