"""Database engine factory and always-fresh schema lifecycle."""

import sqlite3
from pathlib import Path
from typing import Any

from sqlalchemy import MetaData, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from core.constants import DEFAULT_DB_PATH
from core.log import get_logger
from core.types import Environment

logger = get_logger(__name__)

MEMORY_DATABASE_URL = "sqlite:///:memory:"


def setup_database_url(environment: Environment, db_path: Path | None = None) -> str:
    """Construct database URL based on environment configuration.

    Args:
        environment: Environment type
        db_path: Optional database file path; ignored when testing

    Returns:
        Database connection URL
    """
    if environment == Environment.TESTING:
        return MEMORY_DATABASE_URL

    db_path = Path(db_path) if db_path is not None else Path(DEFAULT_DB_PATH)

    # Ensure the directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path}"


def _configure_sqlite_connection(
    dbapi_connection: sqlite3.Connection, connection_record: Any
) -> None:
    """Apply SQLite pragmas on every new connection."""
    cursor = dbapi_connection.cursor()
    try:
        # Cascading deletes depend on this
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.execute("PRAGMA synchronous = NORMAL")
        cursor.execute("PRAGMA busy_timeout = 90000")
        cursor.execute("PRAGMA cache_size = -64000")  # 64MB cache
    finally:
        cursor.close()


def create_database_engine(
    environment: Environment,
    echo: bool = False,
    db_path: Path | None = None,
) -> Engine:
    """Create database engine based on environment configuration.

    Args:
        environment: Environment type
        echo: Enable SQL echo for debugging
        db_path: Optional database file path

    Returns:
        Configured SQLAlchemy engine
    """
    database_url = setup_database_url(environment, db_path)
    logger.info(f"Creating database engine for: {database_url}")

    if database_url == MEMORY_DATABASE_URL:
        # One shared connection, otherwise every checkout sees an empty database
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={
                "check_same_thread": False,
                "timeout": 60.0,
            },
            pool_pre_ping=True,
            pool_recycle=3600,
            pool_size=10,
        )

    event.listen(engine, "connect", _configure_sqlite_connection)
    return engine


def drop_database_tables(engine: Engine) -> None:
    """Drop every table present in the database, declared or not."""
    existing = MetaData()
    existing.reflect(bind=engine)
    if existing.tables:
        logger.warning(f"Dropping existing tables: {', '.join(existing.tables)}")
    existing.drop_all(engine)


def create_database_tables(engine: Engine, metadata: MetaData) -> None:
    """Create all tables registered on the metadata."""
    logger.info("Creating database tables...")

    metadata.create_all(engine)

    for table in metadata.sorted_tables:
        logger.info(f"> Created table for {table.name}")


def reset_database(engine: Engine, metadata: MetaData) -> None:
    """Reset database by dropping everything and recreating the declared tables."""
    logger.warning("Resetting database...")

    drop_database_tables(engine)
    create_database_tables(engine, metadata)

    logger.info("Database reset completed")
