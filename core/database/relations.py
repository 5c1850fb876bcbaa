"""Relation resolution for ``include`` query parameters."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

from sqlalchemy import ColumnElement, Select, Table, func, literal, select

from core.constants import RELATION_SUFFIXES
from core.log import get_logger
from core.schema.compiler import CompiledSchema
from core.schema.descriptors import SchemaDescriptor
from core.types import RelationKind

logger = get_logger(__name__)


@dataclass(frozen=True)
class Relation:
    """A resolved link between two tables.

    ``fk_field`` is the column holding the key and ``referenced_column`` the
    column it points at. For belongs-to the key lives on the source table,
    for has-many it lives on the target.
    """

    kind: RelationKind
    source_table: str
    target_table: str
    fk_field: str
    referenced_column: str


RelationMatcher: TypeAlias = Callable[[SchemaDescriptor, str, str], Relation | None]


def strip_relation_suffix(field_name: str) -> str:
    """Drop a trailing ``Id``/``_id`` from a foreign key field name."""
    for suffix in RELATION_SUFFIXES:
        if field_name.endswith(suffix) and len(field_name) > len(suffix):
            return field_name[: -len(suffix)]
    return field_name


def find_relation(
    schema: SchemaDescriptor, source_table: str, token: str
) -> Relation | None:
    """Match an include token against the schema's foreign keys.

    Belongs-to candidates are checked first in the source table's field
    order, then has-many with the token read as a table name. The first
    match wins; several foreign keys to one table are not disambiguated.

    Args:
        schema: Schema descriptor
        source_table: Table the query reads from
        token: Requested relation name

    Returns:
        The matched relation, or None
    """
    source = schema.get(source_table)
    if source is None:
        return None

    for field_name, fk in source.foreign_keys:
        if token == fk.target_table or token == strip_relation_suffix(field_name):
            return Relation(
                kind=RelationKind.BELONGS_TO,
                source_table=source_table,
                target_table=fk.target_table,
                fk_field=field_name,
                referenced_column=fk.target_column,
            )

    target = schema.get(token)
    if target is not None:
        for field_name, fk in target.foreign_keys:
            if fk.target_table == source_table:
                return Relation(
                    kind=RelationKind.HAS_MANY,
                    source_table=source_table,
                    target_table=target.name,
                    fk_field=field_name,
                    referenced_column=fk.target_column,
                )

    return None


class RelationResolver:
    """Embeds related rows into a read query as JSON subqueries."""

    def __init__(
        self, compiled: CompiledSchema, matcher: RelationMatcher = find_relation
    ) -> None:
        self.compiled = compiled
        self.matcher = matcher

    def find(self, source_table: str, token: str) -> Relation | None:
        return self.matcher(self.compiled.descriptor, source_table, token)

    def _json_object(self, target: Any, table_name: str) -> ColumnElement[Any]:
        # Only declared columns are embedded
        pairs: list[Any] = []
        for column in self.compiled.descriptor.table(table_name).column_names:
            pairs.extend((literal(column), target.c[column]))
        return func.json_object(*pairs)

    def embed(self, query: Select[Any], relation: Relation, token: str) -> Select[Any]:
        """Add the relation to the query as a column labelled ``token``."""
        source: Table = self.compiled.table(relation.source_table)
        # Aliased so that self-references correlate against the outer table
        target = self.compiled.table(relation.target_table).alias(f"rel_{token}")

        if relation.kind == RelationKind.BELONGS_TO:
            subquery = (
                select(self._json_object(target, relation.target_table))
                .where(
                    target.c[relation.referenced_column]
                    == source.c[relation.fk_field]
                )
                .correlate(source)
                .limit(1)
                .scalar_subquery()
            )
        else:
            subquery = (
                select(
                    func.coalesce(
                        func.json_group_array(
                            self._json_object(target, relation.target_table)
                        ),
                        "[]",
                    )
                )
                .where(
                    target.c[relation.fk_field]
                    == source.c[relation.referenced_column]
                )
                .correlate(source)
                .scalar_subquery()
            )

        logger.debug(
            f"Linking {relation.source_table} -> {relation.target_table} "
            f"({relation.kind.value}) as {token}"
        )
        # The embedded relation replaces a source column of the same name
        columns = [
            column for column in query.selected_columns if column.key != token
        ]
        return query.with_only_columns(*columns, subquery.label(token))

    def resolve(self, query: Select[Any], source_table: str, token: str) -> Select[Any]:
        """Augment the query with one relation, or return it unchanged.

        An unresolvable token is not an error.
        """
        relation = self.find(source_table, token)
        if relation is None:
            logger.debug(f"No relation '{token}' on {source_table}; ignoring")
            return query
        return self.embed(query, relation, token)
