"""Global pytest configuration and fixtures."""

import copy
import logging
from collections.abc import Generator
from logging import Logger
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from api.app import create_app
from core import setup_environment_logging
from core.config import Settings
from core.constants import DEFAULT_CONFIG
from core.database.engine import create_database_engine
from core.database.repository import ResourceRepository
from core.models.config import MockliteConfig, parse_schema_config
from core.schema.compiler import CompiledSchema, build_schema, compile_schema
from core.schema.descriptors import SchemaDescriptor
from core.services.seeder import DataGenerator, Seeder
from core.types import Environment

TEST_RANDOM_SEED = 1234


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Setup test logging for all tests."""
    setup_environment_logging(Environment.TESTING, level=logging.DEBUG)


@pytest.fixture(scope="function")
def logger() -> Logger:
    """Provide a logger instance for tests."""
    from core import get_logger

    return get_logger("test")


@pytest.fixture
def sample_config_data() -> dict[str, Any]:
    """Default users/posts config as raw JSON data."""
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def sample_config(sample_config_data: dict[str, Any]) -> MockliteConfig:
    """Validated users/posts config."""
    return parse_schema_config(sample_config_data)


@pytest.fixture
def schema(sample_config: MockliteConfig) -> SchemaDescriptor:
    """Schema descriptor of the users/posts config."""
    return build_schema(sample_config)


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Fresh in-memory database engine."""
    engine = create_database_engine(Environment.TESTING)
    yield engine
    engine.dispose()


@pytest.fixture
def compiled(schema: SchemaDescriptor, engine: Engine) -> CompiledSchema:
    """Users/posts schema compiled into empty tables."""
    return compile_schema(schema, engine)


@pytest.fixture
def seeder(compiled: CompiledSchema, engine: Engine) -> Seeder:
    """Seeder with a fixed random seed (nothing seeded yet)."""
    return Seeder(
        compiled, engine, DataGenerator(compiled, random_seed=TEST_RANDOM_SEED)
    )


@pytest.fixture
def seeded(seeder: Seeder) -> Seeder:
    """Seeder whose tables have been populated once."""
    seeder.run()
    return seeder


@pytest.fixture
def db_session(engine: Engine) -> Generator[Session, None, None]:
    """Database session bound to the test engine."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def repository(compiled: CompiledSchema, db_session: Session) -> ResourceRepository:
    """Resource repository over the compiled schema."""
    return ResourceRepository(compiled, db_session)


@pytest.fixture
def test_settings() -> Settings:
    """Settings for an in-memory, reproducible test server."""
    return Settings(environment=Environment.TESTING, random_seed=TEST_RANDOM_SEED)


@pytest.fixture
def client(
    test_settings: Settings, sample_config: MockliteConfig
) -> Generator[TestClient, None, None]:
    """Test client of a started users/posts server."""
    app = create_app(test_settings, sample_config)
    with TestClient(app) as client:
        yield client
