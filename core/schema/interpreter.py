"""Field type interpreter: raw field definitions to typed descriptors."""

from typing import Any

from pydantic import ValidationError

from core.constants import ENUM_TYPE, FOREIGN_KEY_PREFIX, PRIMARY_KEY_MARKER
from core.exceptions import ConfigError
from core.models.config import FieldDefinition, FieldObject
from core.schema.descriptors import (
    EnumField,
    FieldDescriptor,
    ForeignKeyField,
    GeneratedField,
    LiteralField,
    PrimaryKeyField,
)
from core.schema.generators import get_generator, is_generator_path


def parse_foreign_key(definition: str) -> ForeignKeyField:
    """Parse an ``fk:<table>.<column>`` definition.

    Raises:
        ConfigError: Unless the target is exactly one non-empty table/column pair
    """
    target = definition[len(FOREIGN_KEY_PREFIX) :]
    parts = target.split(".")
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise ConfigError(
            f"Invalid FK definition: {definition!r} (expected 'fk:<table>.<column>')"
        )
    return ForeignKeyField(
        target_table=parts[0].strip(), target_column=parts[1].strip()
    )


def _interpret_string(definition: str) -> FieldDescriptor:
    if definition == PRIMARY_KEY_MARKER:
        return PrimaryKeyField()

    if definition.startswith(FOREIGN_KEY_PREFIX):
        return parse_foreign_key(definition)

    if is_generator_path(definition):
        get_generator(definition)
        return GeneratedField(generator_path=definition)

    return LiteralField(value=definition)


def _interpret_object(definition: FieldObject | dict[str, Any]) -> FieldDescriptor:
    if isinstance(definition, dict):
        try:
            definition = FieldObject.model_validate(definition)
        except ValidationError as e:
            raise ConfigError(f"Invalid field definition: {e}") from e

    if definition.type == ENUM_TYPE:
        if not definition.values:
            raise ConfigError("Enum definition requires a non-empty 'values' list")
        return EnumField(values=tuple(definition.values))

    if is_generator_path(definition.type):
        get_generator(definition.type)
        return GeneratedField(
            generator_path=definition.type, options=definition.options
        )

    raise ConfigError(
        f"Unsupported field type {definition.type!r}: "
        f"expected '{ENUM_TYPE}' or a generator path"
    )


def interpret(definition: FieldDefinition | dict[str, Any]) -> FieldDescriptor:
    """Interpret one field definition into a typed descriptor.

    Args:
        definition: A definition string, an object definition, or a scalar literal

    Returns:
        The descriptor whose kind is implied by the definition's shape

    Raises:
        ConfigError: If the definition is malformed or names an unknown generator
    """
    if isinstance(definition, str):
        return _interpret_string(definition)

    if isinstance(definition, (FieldObject, dict)):
        return _interpret_object(definition)

    return LiteralField(value=definition)
