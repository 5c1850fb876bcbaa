"""Synthetic data generation and (re-)seeding."""

import asyncio
from typing import Any

from faker import Faker
from sqlalchemy import delete, insert, select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import OperationalError

from core.exceptions import ReseedInProgressError
from core.log import get_logger
from core.schema.compiler import CompiledSchema
from core.schema.descriptors import (
    EnumField,
    FieldDescriptor,
    ForeignKeyField,
    GeneratedField,
    LiteralField,
    PrimaryKeyField,
    TableDescriptor,
)
from core.schema.generators import get_generator
from core.types import RowType

logger = get_logger(__name__)


class DataGenerator:
    """Produces synthetic rows for one table at a time."""

    def __init__(
        self,
        compiled: CompiledSchema,
        faker: Faker | None = None,
        random_seed: int | None = None,
    ) -> None:
        self.compiled = compiled
        self.faker = faker or Faker()
        if random_seed is not None:
            self.faker.seed_instance(random_seed)

    def _key_pool(self, connection: Connection, fk: ForeignKeyField) -> list[Any]:
        """Committed key values of the foreign key's target table."""
        target = self.compiled.table(fk.target_table)
        column = target.c[fk.target_column]
        result = connection.execute(select(column).where(column.is_not(None)))
        return list(result.scalars())

    def _value(self, descriptor: FieldDescriptor, key_pool: list[Any] | None) -> Any:
        if isinstance(descriptor, ForeignKeyField):
            # Empty targets degrade to null
            return self.faker.random.choice(key_pool) if key_pool else None

        if isinstance(descriptor, EnumField):
            return self.faker.random.choice(descriptor.values)

        if isinstance(descriptor, GeneratedField):
            value = get_generator(descriptor.generator_path)(
                self.faker, descriptor.options
            )
            if isinstance(value, bool):
                return int(value)
            return value

        if isinstance(descriptor, LiteralField):
            return descriptor.value

        raise TypeError(f"Unsupported field descriptor: {descriptor!r}")

    def generate(
        self, connection: Connection, table: TableDescriptor, count: int
    ) -> list[RowType]:
        """Generate ``count`` rows for a table.

        Primary keys are omitted. Foreign keys draw from the target table's
        rows as committed when the call starts, so targets must be seeded
        first.

        Args:
            connection: Connection used to read foreign key targets
            table: Table to generate rows for
            count: Number of rows

        Returns:
            Row value maps ready for insertion
        """
        key_pools: dict[str, list[Any]] = {}
        for field_name, fk in table.foreign_keys:
            key_pools[field_name] = self._key_pool(connection, fk)

        rows: list[RowType] = []
        for _ in range(count):
            row: RowType = {}
            for field_name, descriptor in table.fields.items():
                if isinstance(descriptor, PrimaryKeyField):
                    continue
                row[field_name] = self._value(descriptor, key_pools.get(field_name))
            rows.append(row)
        return rows


class Seeder:
    """Clears and populates every table in declaration order."""

    def __init__(
        self,
        compiled: CompiledSchema,
        engine: Engine,
        generator: DataGenerator | None = None,
    ) -> None:
        self.compiled = compiled
        self.engine = engine
        self.generator = generator or DataGenerator(compiled)
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def clear(self) -> None:
        """Delete all rows from every table; missing tables are skipped."""
        for table in self.compiled.descriptor:
            try:
                with self.engine.begin() as connection:
                    connection.execute(delete(self.compiled.table(table.name)))
            except OperationalError as e:
                logger.warning(f"Skipping clear of {table.name}: {e.orig}")

    def _insert(
        self, connection: Connection, table: TableDescriptor, rows: list[RowType]
    ) -> None:
        sa_table = self.compiled.table(table.name)
        if any(rows):
            connection.execute(insert(sa_table), rows)
            return
        # Key-only tables
        for _ in rows:
            connection.execute(insert(sa_table))

    def run(self) -> dict[str, int]:
        """Generate and persist every table's seed rows, committing per table.

        Returns:
            Inserted row count per table
        """
        counts: dict[str, int] = {}
        for table in self.compiled.descriptor:
            with self.engine.begin() as connection:
                rows = self.generator.generate(connection, table, table.seed_count)
                if rows:
                    self._insert(connection, table, rows)
            counts[table.name] = len(rows)
            logger.info(f"Seeded {len(rows)} rows into {table.name}")
        return counts

    def seed(self) -> dict[str, int]:
        """Clear then run, as one non-atomic operation."""
        self.clear()
        return self.run()

    async def reseed(self) -> dict[str, int]:
        """Re-seed in a worker thread, rejecting overlapping calls.

        Raises:
            ReseedInProgressError: If another re-seed has not finished
        """
        if self._lock.locked():
            raise ReseedInProgressError("A re-seed is already in progress")

        async with self._lock:
            logger.info("Re-seeding database...")
            counts = await asyncio.to_thread(self.seed)
            logger.info(f"Re-seed completed: {counts}")
            return counts
