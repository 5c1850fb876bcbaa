"""Mocklite command line: initialize a config and serve it."""

import argparse
import sys
from pathlib import Path
from typing import Any

import uvicorn

from api.app import create_app
from core import get_logger, setup_logging
from core.config import Settings, load_settings
from core.exceptions import MockliteError
from core.models.config import load_schema_config, write_default_config
from core.types import Environment

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mocklite", description="Schema-driven mock REST server"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    init_parser = subparsers.add_parser(
        "init", help="Write a default mocklite.config.json"
    )
    init_parser.add_argument(
        "--schema",
        type=Path,
        default=None,
        help="Config file to create (default: mocklite.config.json)",
    )

    for name, help_text in (
        ("dev", "Serve the mock API in development mode"),
        ("start", "Serve the mock API in production mode (no admin endpoints)"),
    ):
        serve_parser = subparsers.add_parser(name, help=help_text)
        serve_parser.add_argument(
            "--port", type=int, default=None, help="Port to listen on"
        )
        serve_parser.add_argument(
            "--host", default=None, help="Interface to bind (default: 127.0.0.1)"
        )
        serve_parser.add_argument(
            "--schema",
            type=Path,
            default=None,
            help="Config file to serve (default: mocklite.config.json)",
        )

    return parser


def run_init(settings: Settings, schema_path: Path | None) -> int:
    path = schema_path or settings.config_path
    if write_default_config(path):
        logger.info("Run 'mocklite dev' to start the server")
    return 0


def run_server(settings: Settings, args: argparse.Namespace) -> int:
    """Load the config, build the app and serve it until interrupted."""
    environment = (
        Environment.PRODUCTION if args.command == "start" else Environment.DEVELOPMENT
    )
    overrides: dict[str, Any] = {"environment": environment}
    if args.schema is not None:
        overrides["config_path"] = args.schema
    if args.host is not None:
        overrides["host"] = args.host
    settings = Settings(**{**settings.model_dump(), **overrides})

    try:
        config = load_schema_config(settings.config_path)
        app = create_app(settings, config)
    except MockliteError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    port = args.port or config.port or settings.port
    logger.info(f"Server running at http://{settings.host}:{port}")
    uvicorn.run(app, host=settings.host, port=port, log_config=None)
    return 0


def main(argv: list[str] | None = None) -> None:
    """Run the mocklite CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    setup_logging(level=settings.log_level)

    if args.command == "init":
        sys.exit(run_init(settings, args.schema))
    elif args.command in ("dev", "start"):
        sys.exit(run_server(settings, args))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
