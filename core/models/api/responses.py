"""API response models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ListMeta(BaseModel):
    """Pagination metadata of a list response."""

    model_config = ConfigDict(populate_by_name=True)

    total: int = Field(..., ge=0, description="Rows matching the filters")
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0, alias="totalPages")


class ListResponse(BaseModel):
    """One page of rows."""

    data: list[dict[str, Any]]
    meta: ListMeta


class DeleteResponse(BaseModel):
    """Response model for a deleted row."""

    success: bool
    id: str
    message: str


class IndexResponse(BaseModel):
    """Root endpoint listing every resource route."""

    message: str
    endpoints: list[str]


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    timestamp: str


class ReseedResponse(BaseModel):
    """Result of an administrative re-seed."""

    status: str = "reseeded"
    tables: dict[str, int]
