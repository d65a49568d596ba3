"""Command-line entry point: ``orca-mcp [--workdir=PATH] [--log-level LEVEL]``."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from dotenv import load_dotenv

from orca_mcp import __version__
from orca_mcp.config.logging_config import LoggingConfig
from orca_mcp.config.settings import ServerSettings
from orca_mcp.observability.logging import setup_logging
from orca_mcp.server.app import create_server

logger = logging.getLogger("orca_mcp")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orca-mcp",
        description="MCP server for OrcaSlicer profile tuning, slicing and G-code analysis.",
    )
    parser.add_argument(
        "--workdir",
        default=None,
        help="Directory holding models and G-code (default: ORCA_WORKDIR or the current directory).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="debug, info or error (default: MCP_LOG_LEVEL or info).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_settings(argv: Sequence[str] | None = None) -> ServerSettings:
    """Parse arguments and build settings; CLI values override the environment."""
    args = build_parser().parse_args(argv)
    overrides: dict[str, str] = {}
    if args.workdir:
        overrides["workdir"] = args.workdir
    if args.log_level:
        overrides["log_level"] = args.log_level
    return ServerSettings(**overrides)


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    settings = load_settings(argv)
    setup_logging(LoggingConfig(level=settings.log_level))

    logger.info(
        "OrcaSlicer MCP Server starting",
        extra={
            "version": __version__,
            "workdir": str(settings.workdir),
            "orcaPath": str(settings.slicer_path),
            "userDir": str(settings.user_dir),
        },
    )
    try:
        create_server(settings).run()
    except Exception as e:
        logger.error("Fatal startup error", extra={"error": str(e)})
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
