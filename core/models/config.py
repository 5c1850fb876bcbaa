"""Models for the mocklite.config.json schema file."""

import json
from pathlib import Path
from typing import Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.constants import DEFAULT_CONFIG
from core.exceptions import ConfigError
from core.log import get_logger

logger = get_logger(__name__)


class FieldObject(BaseModel):
    """Object form of a field definition, e.g. an enum or a generator with options."""

    type: str = Field(..., description='"enum" or a generator path')
    options: Any = Field(default=None, description="Opaque generator options")
    values: list[str | int | float] | None = Field(
        default=None, description="Allowed values for enum fields"
    )


FieldDefinition: TypeAlias = str | int | float | bool | FieldObject


class TableConfig(BaseModel):
    """Declaration of a single table."""

    table: str = Field(..., min_length=1)
    seed: int | None = Field(default=0, ge=0, description="Rows to generate")
    fields: dict[str, FieldDefinition] = Field(default_factory=dict)


class MockliteConfig(BaseModel):
    """Top-level schema configuration file."""

    model_config = ConfigDict(populate_by_name=True)

    port: int | None = None
    delay: int | None = Field(default=None, ge=0, description="Latency in ms")
    error_rate: float | None = Field(default=None, ge=0.0, le=1.0, alias="errorRate")
    database: Literal["sqlite"] = "sqlite"
    tables: list[TableConfig] = Field(..., alias="schema")


def parse_schema_config(data: dict[str, Any]) -> MockliteConfig:
    """Validate an already-parsed config mapping.

    Raises:
        ConfigError: If the mapping does not match the config shape
    """
    try:
        return MockliteConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config: {e}") from e


def load_schema_config(path: Path) -> MockliteConfig:
    """Load and validate the schema config file.

    Args:
        path: Path to the JSON config file

    Returns:
        Validated configuration

    Raises:
        ConfigError: If the file is missing, not JSON, or malformed
    """
    if not path.exists():
        raise ConfigError(f"{path} not found. Run 'mocklite init' first.")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Error reading config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    config = parse_schema_config(data)
    logger.info(f"Loaded config from {path} ({len(config.tables)} tables)")
    return config


def write_default_config(path: Path) -> bool:
    """Write the default users/posts config unless the file already exists.

    Returns:
        True if the file was created, False if it was left untouched
    """
    if path.exists():
        logger.warning(f"{path} already exists; skipping initialization")
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(DEFAULT_CONFIG, indent=2) + "\n", encoding="utf-8")
    logger.info(f"Created {path}")
    return True
