"""Logging setup for the mocklite server and its tests."""

import logging
import logging.handlers
import sys
from pathlib import Path

import colorlog

from core.types import Environment

LOG_FORMAT = (
    "%(asctime)s %(levelname)8s %(message)s (%(name)s@%(filename)s:%(lineno)d)"
)
COLOR_LOG_FORMAT = (
    "%(asctime)s %(log_color)s%(levelname)8s%(reset)s %(message)s "
    "\033[90m(%(name)s@%(filename)s:%(lineno)d)\033[0m"
)
DATE_FORMAT = "%m-%d %H:%M:%S"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

DEFAULT_LOG_DIR = Path("logs")
SERVER_LOG_FILE = "mocklite.log"
TEST_LOG_FILE = Path("test", "test.log")

# Held at WARNING so per-statement SQL and provider loading stay out of the way
QUIET_LOGGERS = ("sqlalchemy.engine", "faker.factory")


def resolve_level(level: int | str) -> int:
    """Turn a level name such as ``"debug"`` into its number.

    Unknown names resolve to INFO.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def console_handler(use_colors: bool = True) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    formatter: logging.Formatter
    if use_colors:
        formatter = colorlog.ColoredFormatter(
            COLOR_LOG_FORMAT, datefmt=DATE_FORMAT, log_colors=LOG_COLORS
        )
    else:
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handler.setFormatter(formatter)
    return handler


def file_handler(log_file: Path, rotate: bool = True) -> logging.Handler:
    """Plain-text file handler; rotated at 5MB, or overwritten when not rotating."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler: logging.Handler
    if rotate:
        handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=5 * 1024 * 1024, backupCount=4, encoding="utf-8"
        )
    else:
        handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: int | str = logging.INFO,
    use_colors: bool = True,
    log_file: Path | None = None,
    rotate: bool = True,
) -> None:
    """Install console and optional file handlers on the root logger.

    Calling it again replaces the previous handlers.

    Args:
        level: Level number or name
        use_colors: Colorize console output with colorlog
        log_file: Also write records to this file
        rotate: Rotate ``log_file`` instead of overwriting it
    """
    level = resolve_level(level)
    handlers = [console_handler(use_colors)]
    if log_file is not None:
        handlers.append(file_handler(log_file, rotate))

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def setup_environment_logging(
    environment: Environment,
    level: int | str = logging.INFO,
    file_logging: bool = False,
    log_dir: Path = DEFAULT_LOG_DIR,
) -> None:
    """Configure logging for one environment.

    Testing writes to ``<log_dir>/test/test.log``, overwritten per run.
    Production always keeps a rotated ``<log_dir>/mocklite.log``.
    Development logs to the console only unless ``file_logging`` is set.
    """
    if environment == Environment.TESTING:
        setup_logging(level, log_file=log_dir / TEST_LOG_FILE, rotate=False)
        return

    log_file = None
    if file_logging or environment == Environment.PRODUCTION:
        log_file = log_dir / SERVER_LOG_FILE
    setup_logging(level, log_file=log_file)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
