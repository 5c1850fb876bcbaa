"""Configuration management for the mocklite server."""

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .constants import CONFIG_FILE_NAME, DEFAULT_DB_PATH
from .types import Environment

TRUTHY_VALUES = ["true", "1", "yes", "on"]


class Settings(BaseModel):
    """Application settings."""

    # Environment
    version: str = Field(default="0.1.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development/production/testing)",
    )

    # API Settings
    api_title: str = Field(default="Mocklite API", description="API title")
    api_version: str = Field(default="1.0.0", description="API version")

    # CORS Settings
    cors_allow_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    enable_file_logging: bool = Field(
        default=False, description="Whether to write logs under ./logs"
    )

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Interface to bind")
    port: int = Field(default=3000, description="Port to listen on")

    # Schema Settings
    config_path: Path = Field(
        default=Path(CONFIG_FILE_NAME), description="Path to the schema config file"
    )
    db_path: Path = Field(
        default=Path(DEFAULT_DB_PATH),
        description="SQLite database file (ignored in testing)",
    )

    # Simulation Settings
    delay_ms: int = Field(
        default=0, ge=0, description="Artificial latency per resource request (ms)"
    )
    error_rate: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Probability of a simulated 500 on resource requests",
    )

    # Seeding Settings
    random_seed: int | None = Field(
        default=None, description="Seed for reproducible generated data"
    )
    admin_enabled: bool = Field(
        default=True, description="Whether the /_admin endpoints are mounted"
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        # Production never exposes the re-seed trigger
        if self.environment == Environment.PRODUCTION:
            self.admin_enabled = False

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == Environment.TESTING


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in TRUTHY_VALUES


def load_settings() -> Settings:
    """Load settings from environment variables."""

    # Load .env file if it exists
    load_dotenv()

    # Parse CORS origins from comma-separated string
    cors_origins_str = os.getenv("MOCKLITE_CORS_ORIGINS", "*")
    if cors_origins_str == "*":
        cors_origins = ["*"]
    else:
        cors_origins = [origin.strip() for origin in cors_origins_str.split(",")]

    random_seed_str = os.getenv("MOCKLITE_RANDOM_SEED")

    return Settings(
        environment=Environment(os.getenv("MOCKLITE_ENV", "development")),
        api_title=os.getenv("MOCKLITE_API_TITLE", "Mocklite API"),
        api_version=os.getenv("MOCKLITE_API_VERSION", "1.0.0"),
        cors_allow_origins=cors_origins,
        log_level=os.getenv("MOCKLITE_LOG_LEVEL", "INFO").upper(),
        enable_file_logging=_env_flag("MOCKLITE_FILE_LOGGING", "false"),
        host=os.getenv("MOCKLITE_HOST", "127.0.0.1"),
        port=int(os.getenv("MOCKLITE_PORT", "3000")),
        config_path=Path(os.getenv("MOCKLITE_CONFIG", CONFIG_FILE_NAME)),
        db_path=Path(os.getenv("MOCKLITE_DB_PATH", DEFAULT_DB_PATH)),
        delay_ms=int(os.getenv("MOCKLITE_DELAY_MS", "0")),
        error_rate=float(os.getenv("MOCKLITE_ERROR_RATE", "0.0")),
        random_seed=int(random_seed_str) if random_seed_str else None,
        admin_enabled=_env_flag("MOCKLITE_ADMIN_ENABLED", "true"),
    )
