"""Tests for the generic resource repository."""

from typing import Any

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from core.database.query_builder import Pagination
from core.database.repository import ResourceRepository
from core.exceptions import StoreError
from core.models.config import parse_schema_config
from core.schema.compiler import build_schema, compile_schema
from core.services.seeder import Seeder


def test_create_assigns_key(repository: ResourceRepository) -> None:
    """Test created rows come back with their assigned key."""
    row = repository.create("users", {"name": "Ada", "role": "admin", "isActive": 1})

    assert row == {
        "id": 1,
        "name": "Ada",
        "email": None,
        "role": "admin",
        "isActive": 1,
    }


def test_create_then_get_round_trip(repository: ResourceRepository) -> None:
    """Test a created row reads back field for field."""
    user = repository.create("users", {"name": "Ada"})
    post = repository.create(
        "posts", {"title": "Hello", "content": "World", "authorId": user["id"]}
    )

    assert repository.get("posts", post["id"]) == post
    assert repository.get("posts", str(post["id"])) == post


def test_create_rejects_unknown_fields(repository: ResourceRepository) -> None:
    """Test undeclared fields are a store error."""
    with pytest.raises(StoreError, match="nickname"):
        repository.create("users", {"nickname": "ada"})


def test_create_rejects_dangling_foreign_key(
    repository: ResourceRepository,
) -> None:
    """Test the engine's foreign key check surfaces as a store error."""
    with pytest.raises(StoreError, match="FOREIGN KEY"):
        repository.create("posts", {"title": "orphan", "authorId": 999})

    # Session still usable after the rollback
    assert repository.count("posts") == 0


def test_create_with_empty_body(repository: ResourceRepository) -> None:
    """Test an empty body inserts a row of defaults."""
    row = repository.create("users", {})

    assert row["id"] == 1
    assert row["name"] is None


def test_get_missing_returns_none(repository: ResourceRepository) -> None:
    """Test missing rows are a None result."""
    assert repository.get("users", 42) is None
    assert repository.get("users", "not-a-number") is None


def test_get_with_include(seeded: Seeder, repository: ResourceRepository) -> None:
    """Test detail reads can embed relations."""
    row = repository.get("posts", 1, includes=["author"])

    assert row is not None
    assert "author" in row


def test_update_is_partial(repository: ResourceRepository) -> None:
    """Test updates only touch the given fields."""
    user = repository.create("users", {"name": "Ada", "role": "admin"})

    updated = repository.update("users", user["id"], {"role": "viewer"})

    assert updated == {**user, "role": "viewer"}


def test_update_never_rewrites_primary_key(repository: ResourceRepository) -> None:
    """Test the primary key in an update body is ignored."""
    user = repository.create("users", {"name": "Ada"})

    updated = repository.update("users", user["id"], {"id": 99, "name": "Grace"})

    assert updated is not None
    assert updated["id"] == user["id"]
    assert repository.get("users", 99) is None


def test_update_with_only_primary_key(repository: ResourceRepository) -> None:
    """Test an update with nothing to change is a store error."""
    user = repository.create("users", {"name": "Ada"})

    with pytest.raises(StoreError, match="No fields to update"):
        repository.update("users", user["id"], {"id": 5})


def test_update_missing_returns_none(repository: ResourceRepository) -> None:
    """Test updating a missing row is a None result."""
    assert repository.update("users", 7, {"name": "nobody"}) is None


def test_delete_cascades(repository: ResourceRepository) -> None:
    """Test deleting a row removes rows that reference it."""
    user = repository.create("users", {"name": "Ada"})
    repository.create("posts", {"title": "one", "authorId": user["id"]})
    repository.create("posts", {"title": "two", "authorId": user["id"]})

    assert repository.delete("users", user["id"]) is True
    assert repository.get("users", user["id"]) is None
    assert repository.count("posts") == 0


def test_delete_missing_returns_false(repository: ResourceRepository) -> None:
    """Test deleting a missing row is a False result."""
    assert repository.delete("users", 3) is False


def test_list_returns_total_and_page(
    seeded: Seeder, repository: ResourceRepository
) -> None:
    """Test list reports the full total alongside one page."""
    rows, total = repository.list("posts", {}, Pagination(page=2, limit=3))

    assert total == 10
    assert [row["id"] for row in rows] == [4, 5, 6]


@pytest.fixture
def keyless_repository(engine: Engine) -> ResourceRepository:
    """Repository over a table without a primary key."""
    config: dict[str, Any] = {
        "schema": [{"table": "notes", "fields": {"body": "faker.lorem.sentence"}}]
    }
    compiled = compile_schema(build_schema(parse_schema_config(config)), engine)
    return ResourceRepository(compiled, Session(engine))


def test_keyless_table_uses_rowid(keyless_repository: ResourceRepository) -> None:
    """Test tables without a primary key are addressed by rowid."""
    first = keyless_repository.create("notes", {"body": "first"})
    keyless_repository.create("notes", {"body": "second"})

    assert first == {"body": "first"}
    assert keyless_repository.get("notes", 2) == {"body": "second"}
    assert keyless_repository.delete("notes", 1) is True
    rows, total = keyless_repository.list("notes", {"id": "2"}, Pagination())
    assert total == 1
    assert rows == [{"body": "second"}]
