"""Resource service: CRUD orchestration and row presentation."""

import json
from collections.abc import Collection, Mapping
from typing import Any

from core.constants import INCLUDE_PARAM
from core.database.query_builder import Pagination
from core.database.relations import Relation
from core.database.repository import ResourceRepository
from core.exceptions import NotFoundError, StoreError
from core.log import get_logger
from core.models.api.responses import DeleteResponse, ListMeta, ListResponse
from core.schema.compiler import CompiledSchema
from core.types import RelationKind, RowType

logger = get_logger(__name__)


def parse_includes(include: str | None) -> list[str]:
    """Split a comma-separated include parameter, dropping blanks and repeats."""
    if not include:
        return []
    tokens: list[str] = []
    for token in include.split(","):
        token = token.strip()
        if token and token not in tokens:
            tokens.append(token)
    return tokens


class ResourceService:
    """Service for CRUD operations on any compiled table."""

    def __init__(self, compiled: CompiledSchema) -> None:
        self.compiled = compiled

    def _ensure_table(self, table_name: str) -> None:
        if table_name not in self.compiled:
            raise NotFoundError(f"Unknown resource: {table_name}")

    def _relations(
        self, repo: ResourceRepository, table_name: str, tokens: list[str]
    ) -> dict[str, Relation]:
        relations = {}
        for token in tokens:
            relation = repo.resolver.find(table_name, token)
            if relation is not None:
                relations[token] = relation
        return relations

    def _present_row(
        self,
        table_name: str,
        row: Mapping[str, Any],
        embedded: Collection[str] = (),
    ) -> RowType:
        """Map stored 0/1 values of boolean fields to True/False."""
        boolean_fields = self.compiled.descriptor.table(table_name).boolean_fields
        presented = dict(row)
        for field_name in boolean_fields:
            if field_name in embedded:
                continue
            value = presented.get(field_name)
            if value is not None:
                presented[field_name] = bool(value)
        return presented

    def present(
        self,
        table_name: str,
        row: Mapping[str, Any],
        relations: Mapping[str, Relation] | None = None,
    ) -> RowType:
        """Convert a stored row to its response shape.

        Embedded relations arrive as JSON text and are decoded, with the
        related table's boolean fields mapped the same way.
        """
        relations = relations or {}
        presented = self._present_row(table_name, row, relations)

        for token, relation in relations.items():
            raw = presented.get(token)
            if raw is None:
                presented[token] = (
                    [] if relation.kind == RelationKind.HAS_MANY else None
                )
                continue

            embedded = json.loads(raw) if isinstance(raw, str) else raw
            if isinstance(embedded, list):
                presented[token] = [
                    self._present_row(relation.target_table, item) for item in embedded
                ]
            elif isinstance(embedded, dict):
                presented[token] = self._present_row(relation.target_table, embedded)
            else:
                presented[token] = embedded

        return presented

    async def list_resources(
        self,
        table_name: str,
        params: Mapping[str, Any],
        repo: ResourceRepository,
    ) -> ListResponse:
        """List one filtered, paginated page of a table."""
        self._ensure_table(table_name)
        pagination = Pagination.from_params(params)
        tokens = parse_includes(params.get(INCLUDE_PARAM))
        relations = self._relations(repo, table_name, tokens)

        rows, total = repo.list(table_name, params, pagination, list(relations))
        return ListResponse(
            data=[self.present(table_name, row, relations) for row in rows],
            meta=ListMeta(
                total=total,
                page=pagination.page,
                limit=pagination.limit,
                total_pages=pagination.total_pages(total),
            ),
        )

    async def get_resource(
        self,
        table_name: str,
        row_id: str,
        repo: ResourceRepository,
        include: str | None = None,
    ) -> RowType:
        """Get one row by key.

        Raises:
            NotFoundError: If the row does not exist
        """
        self._ensure_table(table_name)
        relations = self._relations(repo, table_name, parse_includes(include))

        row = repo.get(table_name, row_id, list(relations))
        if row is None:
            raise NotFoundError("Not Found")
        return self.present(table_name, row, relations)

    async def create_resource(
        self,
        table_name: str,
        body: Any,
        repo: ResourceRepository,
    ) -> RowType:
        """Insert a row and return it as persisted.

        Raises:
            StoreError: If the body is not an object or the store rejects it
        """
        self._ensure_table(table_name)
        if not isinstance(body, dict):
            raise StoreError("Request body must be a JSON object")

        row = repo.create(table_name, body)
        logger.info(f"Created {table_name} row")
        return self.present(table_name, row)

    async def update_resource(
        self,
        table_name: str,
        row_id: str,
        body: Any,
        repo: ResourceRepository,
    ) -> RowType:
        """Partially update a row.

        Raises:
            NotFoundError: If the row does not exist
            StoreError: If the body is not an object or the store rejects it
        """
        self._ensure_table(table_name)
        if not isinstance(body, dict):
            raise StoreError("Request body must be a JSON object")

        row = repo.update(table_name, row_id, body)
        if row is None:
            raise NotFoundError("Not Found")
        return self.present(table_name, row)

    async def delete_resource(
        self,
        table_name: str,
        row_id: str,
        repo: ResourceRepository,
    ) -> DeleteResponse:
        """Delete a row.

        Raises:
            NotFoundError: If the row does not exist
        """
        self._ensure_table(table_name)
        if not repo.delete(table_name, row_id):
            raise NotFoundError("Not Found")

        logger.info(f"Deleted {table_name} row {row_id}")
        return DeleteResponse(
            success=True,
            id=str(row_id),
            message=f"Deleted {table_name} {row_id}",
        )
