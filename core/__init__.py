"""Core functionality for the mocklite server."""

from .config import Settings, load_settings
from .log import get_logger, setup_environment_logging, setup_logging
from .types import Environment

__all__ = [
    "Environment",
    "Settings",
    "load_settings",
    "get_logger",
    "setup_environment_logging",
    "setup_logging",
]
