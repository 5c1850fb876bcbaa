"""Tests for the schema compiler."""

from typing import Any

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from core.exceptions import ConfigError, IntegrityError
from core.models.config import parse_schema_config
from core.schema.compiler import (
    build_metadata,
    build_schema,
    compile_schema,
    table_definition,
)
from core.schema.descriptors import SchemaDescriptor
from core.types import StorageType


def _schema(*tables: dict[str, Any]) -> SchemaDescriptor:
    return build_schema(parse_schema_config({"schema": list(tables)}))


def test_build_schema_keeps_declaration_order(schema: SchemaDescriptor) -> None:
    """Test tables and fields keep their declared order."""
    assert schema.table_names == ["users", "posts"]
    assert schema.table("users").column_names == [
        "id",
        "name",
        "email",
        "role",
        "isActive",
    ]
    assert schema.table("posts").seed_count == 10
    assert schema.table("users").boolean_fields == ["isActive"]
    assert schema.table("posts").primary_key == "id"


def test_build_schema_seed_defaults_to_zero() -> None:
    """Test a missing seed count means no rows."""
    schema = _schema({"table": "tags", "fields": {"id": "pk"}})

    assert schema.table("tags").seed_count == 0


def test_build_schema_undefined_fk_table() -> None:
    """Test a foreign key to an undeclared table is an integrity error."""
    with pytest.raises(IntegrityError, match="undefined table 'authors'"):
        _schema({"table": "posts", "fields": {"authorId": "fk:authors.id"}})


def test_build_schema_undefined_fk_column() -> None:
    """Test a foreign key to an undeclared column is an integrity error."""
    with pytest.raises(IntegrityError, match="users.uuid"):
        _schema(
            {"table": "users", "fields": {"id": "pk"}},
            {"table": "posts", "fields": {"authorId": "fk:users.uuid"}},
        )


def test_build_schema_fk_to_non_key_column() -> None:
    """Test a foreign key must target the referenced table's primary key."""
    with pytest.raises(IntegrityError, match="primary key of 'users'"):
        _schema(
            {
                "table": "users",
                "seed": 3,
                "fields": {"id": "pk", "code": "faker.number.int"},
            },
            {"table": "posts", "seed": 3, "fields": {"userCode": "fk:users.code"}},
        )


def test_build_schema_fk_to_keyless_table() -> None:
    """Test a table without a primary key cannot be referenced."""
    with pytest.raises(IntegrityError, match="primary key of 'notes'"):
        _schema(
            {"table": "notes", "fields": {"id": "faker.number.int"}},
            {"table": "tags", "fields": {"noteId": "fk:notes.id"}},
        )


def test_build_schema_duplicate_table() -> None:
    """Test table names must be unique."""
    with pytest.raises(ConfigError, match="Duplicate table"):
        _schema(
            {"table": "users", "fields": {"id": "pk"}},
            {"table": "users", "fields": {"id": "pk"}},
        )


@pytest.mark.parametrize("name", ["health", "_admin", "user posts", "1users"])
def test_build_schema_rejects_table_name(name: str) -> None:
    """Test reserved and non-identifier table names are rejected."""
    with pytest.raises(ConfigError):
        _schema({"table": name, "fields": {"id": "pk"}})


def test_build_schema_rejects_two_primary_keys() -> None:
    """Test a table may declare at most one primary key."""
    with pytest.raises(ConfigError, match="more than one primary key"):
        _schema({"table": "users", "fields": {"id": "pk", "uid": "pk"}})


def test_build_schema_reports_field_on_error() -> None:
    """Test interpreter errors name the offending table and field."""
    with pytest.raises(ConfigError, match="Table 'users', field 'role'"):
        _schema({"table": "users", "fields": {"role": {"type": "enum"}}})


def test_build_schema_accepts_forward_references() -> None:
    """Test foreign keys may target tables declared later."""
    schema = _schema(
        {"table": "posts", "fields": {"id": "pk", "authorId": "fk:users.id"}},
        {"table": "users", "fields": {"id": "pk"}},
    )

    assert schema.table_names == ["posts", "users"]


def test_table_definition(schema: SchemaDescriptor) -> None:
    """Test descriptors map to column definitions."""
    definition = table_definition(schema.table("posts"))
    columns = {column.name: column for column in definition.columns}

    assert definition.column_names == ["id", "title", "content", "authorId"]
    assert columns["id"].primary_key and columns["id"].auto_increment
    assert columns["authorId"].references == "users.id"
    assert columns["authorId"].on_delete == "CASCADE"
    assert columns["title"].type == StorageType.TEXT
    assert definition.indexes == ["authorId"]


def test_compile_schema_creates_tables(
    schema: SchemaDescriptor, engine: Engine
) -> None:
    """Test compilation creates every table with its declared columns."""
    compiled = compile_schema(schema, engine)
    inspector = inspect(engine)

    assert set(inspector.get_table_names()) == {"users", "posts"}
    assert [c["name"] for c in inspector.get_columns("posts")] == [
        "id",
        "title",
        "content",
        "authorId",
    ]
    fks = inspector.get_foreign_keys("posts")
    assert fks[0]["referred_table"] == "users"
    assert fks[0]["options"].get("ondelete") == "CASCADE"
    assert compiled.table("users").name == "users"
    assert "posts" in compiled


def test_compile_schema_replaces_existing_tables(
    schema: SchemaDescriptor, engine: Engine
) -> None:
    """Test every start drops whatever the store held before."""
    with engine.begin() as connection:
        connection.execute(text("CREATE TABLE legacy (id INTEGER)"))
        connection.execute(text("CREATE TABLE users (old TEXT)"))
        connection.execute(text("INSERT INTO users (old) VALUES ('stale')"))

    compile_schema(schema, engine)
    inspector = inspect(engine)

    assert "legacy" not in inspector.get_table_names()
    assert "old" not in [c["name"] for c in inspector.get_columns("users")]
    with engine.connect() as connection:
        assert connection.execute(text("SELECT count(*) FROM users")).scalar() == 0


def test_compile_schema_with_forward_reference(engine: Engine) -> None:
    """Test tables are created in dependency order."""
    schema = _schema(
        {"table": "posts", "fields": {"id": "pk", "authorId": "fk:users.id"}},
        {"table": "users", "fields": {"id": "pk"}},
    )

    compile_schema(schema, engine)

    assert set(inspect(engine).get_table_names()) == {"users", "posts"}


def test_compiled_schema_unknown_table(schema: SchemaDescriptor) -> None:
    """Test looking up an undeclared table raises KeyError."""
    compiled = build_metadata(schema)

    with pytest.raises(KeyError):
        compiled.table("comments")
