"""Tests for error handler utilities."""

import pytest
from fastapi import HTTPException

from api.utils.error_handler import handle_api_operation, handle_async_api_operation
from core.exceptions import NotFoundError, ReseedInProgressError, StoreError


def test_handle_api_operation_returns_success_result() -> None:
    """Test successful API operation returns expected result."""

    def success_operation() -> str:
        return "success"

    result = handle_api_operation(success_operation)
    assert result == "success"


@pytest.mark.parametrize(
    "error, status_code",
    [
        (NotFoundError("Not Found"), 404),
        (StoreError("FOREIGN KEY constraint failed"), 400),
        (ValueError("Validation error"), 400),
        (ReseedInProgressError("busy"), 409),
    ],
)
def test_handle_api_operation_maps_domain_errors(
    error: Exception, status_code: int
) -> None:
    """Test domain errors map to their HTTP status with the message as detail."""

    def failing_operation() -> None:
        raise error

    with pytest.raises(HTTPException) as exc_info:
        handle_api_operation(failing_operation)

    assert exc_info.value.status_code == status_code
    assert exc_info.value.detail == str(error)


def test_handle_api_operation_raises_500_for_unexpected_error() -> None:
    """Test API operation raises HTTP 500 for unexpected errors."""

    def unexpected_error_operation() -> None:
        raise Exception("Unexpected error")

    with pytest.raises(HTTPException) as exc_info:
        handle_api_operation(unexpected_error_operation, "Custom error message")

    assert exc_info.value.status_code == 500
    assert "Custom error message" in str(exc_info.value.detail)
    assert "Unexpected error" in str(exc_info.value.detail)


def test_handle_api_operation_reraises_http_exception() -> None:
    """Test HTTP exceptions pass through untouched."""

    def http_error_operation() -> None:
        raise HTTPException(status_code=418, detail="teapot")

    with pytest.raises(HTTPException) as exc_info:
        handle_api_operation(http_error_operation)

    assert exc_info.value.status_code == 418


@pytest.mark.asyncio
async def test_handle_async_api_operation() -> None:
    """Test async operations get the same conversion."""

    async def success_operation() -> int:
        return 42

    async def not_found_operation() -> None:
        raise NotFoundError("Not Found")

    assert await handle_async_api_operation(success_operation) == 42
    with pytest.raises(HTTPException) as exc_info:
        await handle_async_api_operation(not_found_operation)
    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Not Found"
