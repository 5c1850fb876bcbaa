"""Administrative endpoints router."""

from fastapi import APIRouter, Depends

from api.dependencies import get_seeder
from api.utils.error_handler import handle_async_api_operation
from core import get_logger
from core.models import ReseedResponse
from core.services.seeder import Seeder

logger = get_logger(__name__)

router = APIRouter(prefix="/_admin", tags=["admin"])


@router.post("/reseed", response_model=ReseedResponse)
async def reseed(seeder: Seeder = Depends(get_seeder)) -> ReseedResponse:
    """Clear every table and generate fresh seed rows.

    Returns:
        Inserted row count per table

    Raises:
        HTTPException: 409 if a re-seed is already running
    """

    async def reseed_operation() -> ReseedResponse:
        counts = await seeder.reseed()
        return ReseedResponse(tables=counts)

    return await handle_async_api_operation(
        reseed_operation, error_message="Failed to re-seed"
    )
