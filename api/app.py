"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.middleware import SimulationMiddleware
from api.routers import admin_router, common_router, create_resource_router
from core import get_logger, setup_environment_logging
from core.config import Settings, load_settings
from core.database.engine import create_database_engine
from core.models.config import MockliteConfig, load_schema_config
from core.schema.compiler import build_schema, compile_schema
from core.schema.descriptors import SchemaDescriptor
from core.services.resource_service import ResourceService
from core.services.seeder import DataGenerator, Seeder

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    schema: SchemaDescriptor = app.state.schema

    if not settings.is_testing:
        setup_environment_logging(
            settings.environment,
            level=settings.log_level,
            file_logging=settings.enable_file_logging,
        )
    logger.info(f"Starting Mocklite server in {settings.environment.value} mode")

    # Always-fresh store: drop, recreate and seed on every start
    engine = create_database_engine(settings.environment, db_path=settings.db_path)
    compiled = compile_schema(schema, engine)
    app.state.engine = engine
    app.state.compiled_schema = compiled

    seeder = Seeder(
        compiled,
        engine,
        DataGenerator(compiled, random_seed=settings.random_seed),
    )
    counts = seeder.run()
    app.state.seeder = seeder
    app.state.resource_service = ResourceService(compiled)

    logger.info(f"Mocklite server initialized with {sum(counts.values())} rows")

    yield

    engine.dispose()
    logger.info("Mocklite server shutting down")


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def create_app(
    settings: Settings | None = None,
    config: MockliteConfig | None = None,
) -> FastAPI:
    """Create FastAPI app for a schema config.

    Config errors surface here, before anything is served.

    Args:
        settings: Settings to use (loaded from the environment if omitted)
        config: Schema config (read from ``settings.config_path`` if omitted)

    Returns:
        Configured application

    Raises:
        ConfigError: If the config is missing or malformed
        IntegrityError: If a foreign key targets an undeclared table or column
    """
    settings = settings or load_settings()
    if config is None:
        config = load_schema_config(settings.config_path)
    schema = build_schema(config)

    delay_ms = config.delay if config.delay is not None else settings.delay_ms
    error_rate = (
        config.error_rate if config.error_rate is not None else settings.error_rate
    )

    app = FastAPI(
        title=settings.api_title,
        description="Schema-driven mock REST API",
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.schema = schema

    app.add_middleware(
        SimulationMiddleware,
        resource_paths=[f"/{name}" for name in schema.table_names],
        delay_ms=delay_ms,
        error_rate=error_rate,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(common_router)
    if settings.admin_enabled:
        app.include_router(admin_router)
    for table in schema:
        app.include_router(create_resource_router(table.name))

    app.add_exception_handler(Exception, global_exception_handler)
    return app
