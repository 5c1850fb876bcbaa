"""Common API endpoints router."""

import datetime

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_settings
from core import get_logger
from core.config import Settings
from core.models import HealthResponse, IndexResponse
from core.schema.descriptors import SchemaDescriptor

logger = get_logger(__name__)

router = APIRouter(tags=["common"])


@router.get("/", response_model=IndexResponse)
async def root(request: Request) -> IndexResponse:
    """Root endpoint listing every resource route."""
    schema: SchemaDescriptor = request.app.state.schema
    return IndexResponse(
        message="Mocklite is running!",
        endpoints=[f"/{name}" for name in schema.table_names],
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_settings),
) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        version=settings.api_version,
        timestamp=datetime.datetime.now().isoformat(),
    )
