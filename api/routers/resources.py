"""Per-table CRUD routers."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status

from api.dependencies import get_resource_repository, get_resource_service
from api.utils.error_handler import handle_async_api_operation
from core.database.repository import ResourceRepository
from core.models import DeleteResponse, ListResponse
from core.services.resource_service import ResourceService
from core.types import RowType


def create_resource_router(table_name: str) -> APIRouter:
    """Build the CRUD router serving ``/<table_name>``.

    Args:
        table_name: Compiled table the routes operate on

    Returns:
        Router to include in the application
    """
    router = APIRouter(prefix=f"/{table_name}", tags=[table_name])

    @router.get("", response_model=ListResponse)
    async def list_rows(
        request: Request,
        service: ResourceService = Depends(get_resource_service),
        repo: ResourceRepository = Depends(get_resource_repository),
    ) -> ListResponse:
        """List rows with `field=value` filters, `page`, `limit` and `include`."""
        params = dict(request.query_params)

        async def list_operation() -> ListResponse:
            return await service.list_resources(table_name, params, repo)

        return await handle_async_api_operation(
            list_operation, error_message=f"Failed to list {table_name}"
        )

    @router.get("/{id}")
    async def get_row(
        id: str,
        include: str | None = None,
        service: ResourceService = Depends(get_resource_service),
        repo: ResourceRepository = Depends(get_resource_repository),
    ) -> RowType:
        """Get one row by key, optionally embedding relations."""

        async def get_operation() -> RowType:
            return await service.get_resource(table_name, id, repo, include=include)

        return await handle_async_api_operation(
            get_operation, error_message=f"Failed to get {table_name}"
        )

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_row(
        body: Any = Body(...),
        service: ResourceService = Depends(get_resource_service),
        repo: ResourceRepository = Depends(get_resource_repository),
    ) -> RowType:
        """Create a row and return it with its assigned key."""

        async def create_operation() -> RowType:
            return await service.create_resource(table_name, body, repo)

        return await handle_async_api_operation(
            create_operation, error_message=f"Failed to create {table_name}"
        )

    @router.put("/{id}")
    @router.patch("/{id}")
    async def update_row(
        id: str,
        body: Any = Body(...),
        service: ResourceService = Depends(get_resource_service),
        repo: ResourceRepository = Depends(get_resource_repository),
    ) -> RowType:
        """Partially update a row."""

        async def update_operation() -> RowType:
            return await service.update_resource(table_name, id, body, repo)

        return await handle_async_api_operation(
            update_operation, error_message=f"Failed to update {table_name}"
        )

    @router.delete("/{id}", response_model=DeleteResponse)
    async def delete_row(
        id: str,
        service: ResourceService = Depends(get_resource_service),
        repo: ResourceRepository = Depends(get_resource_repository),
    ) -> DeleteResponse:
        """Delete a row and its cascading dependents."""

        async def delete_operation() -> DeleteResponse:
            return await service.delete_resource(table_name, id, repo)

        return await handle_async_api_operation(
            delete_operation, error_message=f"Failed to delete {table_name}"
        )

    return router
