"""Generic filtering and pagination over compiled tables."""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement, Select, Table, func, literal_column, select

from core.constants import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    ID_PARAM,
    LIMIT_PARAM,
    PAGE_PARAM,
    RESERVED_QUERY_PARAMS,
)
from core.schema.compiler import CompiledSchema
from core.types import StorageType

TRUE_VALUES = ("true", "1")
FALSE_VALUES = ("false", "0")


def parse_positive_int(value: Any, default: int) -> int:
    """Parse a positive integer, falling back to the default."""
    try:
        parsed = int(str(value))
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def coerce_value(value: str, storage_type: StorageType) -> Any:
    """Coerce a query-string value to the column's storage type.

    Unparseable values are passed through unchanged.
    """
    if storage_type == StorageType.BOOLEAN:
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return 1
        if lowered in FALSE_VALUES:
            return 0
        return value

    if storage_type == StorageType.INTEGER:
        try:
            return int(value)
        except ValueError:
            return value

    return value


@dataclass(frozen=True)
class Pagination:
    """Page window of a list request."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "Pagination":
        return cls(
            page=parse_positive_int(params.get(PAGE_PARAM), DEFAULT_PAGE),
            limit=parse_positive_int(params.get(LIMIT_PARAM), DEFAULT_LIMIT),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)


class QueryAugmenter:
    """Applies request filters and pagination using only schema metadata."""

    def __init__(self, compiled: CompiledSchema) -> None:
        self.compiled = compiled

    def key_column(self, table_name: str) -> ColumnElement[Any]:
        """Column addressed by ``id``: the primary key, or SQLite's rowid."""
        table = self.compiled.table(table_name)
        primary_key = self.compiled.descriptor.table(table_name).primary_key
        if primary_key is None:
            return literal_column(f'"{table_name}".rowid')
        return table.c[primary_key]

    def build_predicates(
        self, table_name: str, params: Mapping[str, Any]
    ) -> list[ColumnElement[bool]]:
        """Build one predicate per recognised filter parameter.

        Args:
            table_name: Table being queried
            params: Raw request parameters

        Returns:
            Predicates in parameter order
        """
        table = self.compiled.table(table_name)
        descriptor = self.compiled.descriptor.table(table_name)
        predicates: list[ColumnElement[bool]] = []

        for key, value in params.items():
            if key in RESERVED_QUERY_PARAMS or value is None:
                continue

            value = str(value)
            if key == ID_PARAM:
                predicates.append(self.id_predicate(table_name, value))
                continue

            field = descriptor.fields.get(key)
            if field is None:
                continue

            column = table.c[key]
            if field.storage_type == StorageType.TEXT:
                predicates.append(column.like(f"%{value}%"))
            else:
                predicates.append(column == coerce_value(value, field.storage_type))

        return predicates

    def id_predicate(self, table_name: str, value: str) -> ColumnElement[bool]:
        """Exact match for the `id` parameter, even on a text-declared `id`."""
        descriptor = self.compiled.descriptor.table(table_name)
        field = descriptor.fields.get(ID_PARAM)
        if field is not None and descriptor.primary_key != ID_PARAM:
            column = self.compiled.table(table_name).c[ID_PARAM]
            return column == coerce_value(value, field.storage_type)
        return self.key_column(table_name) == coerce_value(value, StorageType.INTEGER)

    def apply_filters(
        self, query: Select[Any], table_name: str, params: Mapping[str, Any]
    ) -> tuple[Select[Any], int]:
        """Apply the request's filters to a query.

        Returns:
            Tuple of (filtered query, number of predicates applied)
        """
        predicates = self.build_predicates(table_name, params)
        if predicates:
            query = query.where(*predicates)
        return query, len(predicates)

    def base_query(self, table_name: str) -> Select[Any]:
        table: Table = self.compiled.table(table_name)
        return select(table).select_from(table)

    def count_query(self, table_name: str, params: Mapping[str, Any]) -> Select[Any]:
        """Count rows matching the same predicates as the list query."""
        table = self.compiled.table(table_name)
        query = select(func.count()).select_from(table)
        query, _ = self.apply_filters(query, table_name, params)
        return query

    def paginate(
        self, query: Select[Any], table_name: str, pagination: Pagination
    ) -> Select[Any]:
        """Order by key and cut the page window."""
        return (
            query.order_by(self.key_column(table_name))
            .limit(pagination.limit)
            .offset(pagination.offset)
        )
