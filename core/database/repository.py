"""Generic CRUD repository over compiled tables."""

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.database.query_builder import Pagination, QueryAugmenter, coerce_value
from core.database.relations import RelationResolver
from core.exceptions import StoreError
from core.log import get_logger
from core.schema.compiler import CompiledSchema
from core.types import RowType, StorageType

logger = get_logger(__name__)


def _store_error(error: SQLAlchemyError) -> StoreError:
    # Surface the driver message, not the SQL statement
    if isinstance(error, DBAPIError) and error.orig is not None:
        return StoreError(str(error.orig))
    return StoreError(str(error))


class ResourceRepository:
    """CRUD operations for any table of a compiled schema.

    Not-found is a result (``None``/``False``), never an exception.
    """

    def __init__(
        self,
        compiled: CompiledSchema,
        db: Session,
        augmenter: QueryAugmenter | None = None,
        resolver: RelationResolver | None = None,
    ) -> None:
        self.compiled = compiled
        self.db = db
        self.augmenter = augmenter or QueryAugmenter(compiled)
        self.resolver = resolver or RelationResolver(compiled)

    def _key_predicate(self, table_name: str, row_id: Any) -> Any:
        key = coerce_value(str(row_id), StorageType.INTEGER)
        return self.augmenter.key_column(table_name) == key

    def _check_fields(self, table_name: str, data: Mapping[str, Any]) -> None:
        declared = self.compiled.descriptor.table(table_name).fields
        unknown = [key for key in data if key not in declared]
        if unknown:
            raise StoreError(
                f"Unknown field(s) for {table_name}: {', '.join(unknown)}"
            )

    def list(
        self,
        table_name: str,
        params: Mapping[str, Any],
        pagination: Pagination,
        includes: Sequence[str] = (),
    ) -> tuple[list[RowType], int]:
        """List one page of filtered rows.

        Args:
            table_name: Table to read
            params: Request parameters (filters and reserved keys)
            pagination: Page window
            includes: Relation tokens to embed

        Returns:
            Tuple of (rows on the page, total matching rows)
        """
        count_query = self.augmenter.count_query(table_name, params)
        total = self.db.execute(count_query).scalar_one()

        query = self.augmenter.base_query(table_name)
        for token in includes:
            query = self.resolver.resolve(query, table_name, token)
        query, _ = self.augmenter.apply_filters(query, table_name, params)
        query = self.augmenter.paginate(query, table_name, pagination)

        rows = [dict(row._mapping) for row in self.db.execute(query)]
        return rows, total

    def get(
        self, table_name: str, row_id: Any, includes: Sequence[str] = ()
    ) -> RowType | None:
        """Get one row by key, or None."""
        query = self.augmenter.base_query(table_name)
        for token in includes:
            query = self.resolver.resolve(query, table_name, token)
        query = query.where(self._key_predicate(table_name, row_id))

        row = self.db.execute(query).first()
        return dict(row._mapping) if row is not None else None

    def count(self, table_name: str) -> int:
        table = self.compiled.table(table_name)
        return self.db.execute(select(func.count()).select_from(table)).scalar_one()

    def create(self, table_name: str, data: Mapping[str, Any]) -> RowType:
        """Insert a row and return it as persisted.

        Raises:
            StoreError: If a field is undeclared or the engine rejects the row
        """
        self._check_fields(table_name, data)
        table = self.compiled.table(table_name)

        try:
            statement = insert(table).values(dict(data)) if data else insert(table)
            result = self.db.execute(statement)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create {table_name} row {dict(data)}: {e}")
            raise _store_error(e) from e

        row_id = result.lastrowid
        logger.debug(f"Created {table_name} row {row_id}")
        row = self.get(table_name, row_id)
        if row is None:
            raise StoreError(f"Created {table_name} row {row_id} was not found")
        return row

    def update(
        self, table_name: str, row_id: Any, data: Mapping[str, Any]
    ) -> RowType | None:
        """Apply a partial update; the primary key is never rewritten.

        Returns:
            Updated row, or None if it does not exist

        Raises:
            StoreError: If no updatable fields remain or the engine rejects them
        """
        self._check_fields(table_name, data)
        primary_key = self.compiled.descriptor.table(table_name).primary_key
        values = {key: value for key, value in data.items() if key != primary_key}

        if self.get(table_name, row_id) is None:
            return None
        if not values:
            raise StoreError("No fields to update")

        table = self.compiled.table(table_name)
        try:
            self.db.execute(
                update(table)
                .where(self._key_predicate(table_name, row_id))
                .values(values)
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update {table_name} row {row_id}: {e}")
            raise _store_error(e) from e

        return self.get(table_name, row_id)

    def delete(self, table_name: str, row_id: Any) -> bool:
        """Delete a row by key; dependents go with it through cascading keys."""
        table = self.compiled.table(table_name)
        try:
            result = self.db.execute(
                delete(table).where(self._key_predicate(table_name, row_id))
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete {table_name} row {row_id}: {e}")
            raise _store_error(e) from e

        return result.rowcount > 0
