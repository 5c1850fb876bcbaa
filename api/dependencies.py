"""FastAPI dependencies backed by app state."""

from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from core.config import Settings
from core.database.repository import ResourceRepository
from core.log import get_logger
from core.schema.compiler import CompiledSchema
from core.services.resource_service import ResourceService
from core.services.seeder import Seeder

logger = get_logger(__name__)


def get_settings(request: Request) -> Settings:
    """Get settings from app state."""
    settings: Settings = request.app.state.settings
    return settings


# Database engine dependency
def get_engine(request: Request) -> Engine:
    """Get database engine from app state."""
    engine: Engine = request.app.state.engine
    return engine


# Database session dependency
def get_db(
    engine: Annotated[Engine, Depends(get_engine)],
) -> Generator[Session, None, None]:
    """Get a database session bound to the app's engine."""
    with Session(engine) as session:
        yield session


def get_compiled_schema(request: Request) -> CompiledSchema:
    """Get the compiled schema from app state."""
    compiled: CompiledSchema = request.app.state.compiled_schema
    return compiled


# Repository dependencies
def get_resource_repository(
    compiled: Annotated[CompiledSchema, Depends(get_compiled_schema)],
    db: Annotated[Session, Depends(get_db)],
) -> ResourceRepository:
    """Get resource repository."""
    return ResourceRepository(compiled, db)


# Service dependencies
def get_resource_service(request: Request) -> ResourceService:
    """Get resource service from app state."""
    service: ResourceService = request.app.state.resource_service
    return service


def get_seeder(request: Request) -> Seeder:
    """Get seeder from app state."""
    seeder: Seeder = request.app.state.seeder
    return seeder
