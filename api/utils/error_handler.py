"""Error handling utilities for API endpoints."""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from fastapi import HTTPException, status

from core.exceptions import NotFoundError, ReseedInProgressError, StoreError
from core.log import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


def _to_http_exception(e: Exception, error_message: str) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, (StoreError, ValueError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, ReseedInProgressError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    logger.error(f"{error_message}: {e}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"{error_message}: {str(e)}",
    )


def handle_api_operation(
    operation: Callable[[], T],
    error_message: str = "Operation failed",
) -> T:
    """Handle API operations with consistent error handling."""
    try:
        return operation()
    except HTTPException:
        raise
    except Exception as e:
        raise _to_http_exception(e, error_message) from e


async def handle_async_api_operation(
    operation: Callable[[], Awaitable[T]],
    error_message: str = "Operation failed",
) -> T:
    """Handle async API operations with consistent error handling."""
    try:
        return await operation()
    except HTTPException:
        raise
    except Exception as e:
        raise _to_http_exception(e, error_message) from e
