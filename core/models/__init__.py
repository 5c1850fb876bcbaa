"""Unified models package for the mocklite server."""

from core.models.api.responses import (
    DeleteResponse,
    HealthResponse,
    IndexResponse,
    ListMeta,
    ListResponse,
    ReseedResponse,
)
from core.models.config import (
    FieldDefinition,
    FieldObject,
    MockliteConfig,
    TableConfig,
)

__all__ = [
    # Config file models
    "FieldDefinition",
    "FieldObject",
    "MockliteConfig",
    "TableConfig",
    # API models
    "DeleteResponse",
    "HealthResponse",
    "IndexResponse",
    "ListMeta",
    "ListResponse",
    "ReseedResponse",
]
