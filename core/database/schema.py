"""Physical schema definitions derived from table descriptors."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from core.types import StorageType


@dataclass
class ColumnDefinition:
    """Database column definition."""

    name: str
    type: StorageType
    nullable: bool = True
    primary_key: bool = False
    unique: bool = False
    auto_increment: bool = False
    references: str | None = None
    on_delete: str | None = None


@dataclass
class TableDefinition:
    """Database table definition."""

    name: str
    columns: Sequence[ColumnDefinition]
    indexes: Sequence[str] = field(default_factory=list)

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]
