#!/usr/bin/env python3

import argparse
from typing import Optional, Sequence

import dotenv
import uvicorn
from fastmcp.utilities.logging import configure_logging, get_logger

from weather_mcp.app import create_app
from weather_mcp.config.settings import ServerSettings

logger = get_logger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Weather and Material color tools over MCP streamable HTTP"
    )
    parser.add_argument("--host", help="Interface to bind (MCP_HOST)")
    parser.add_argument("--port", type=int, help="Port to listen on (MCP_PORT)")
    parser.add_argument(
        "--mode",
        choices=["stateless", "shared", "sessions"],
        help="Transport strategy (MCP_TRANSPORT__MODE)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (MCP_LOG_LEVEL)",
    )
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> ServerSettings:
    """Environment first, then command-line overrides."""
    settings = ServerSettings()
    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    if args.mode:
        settings.transport.mode = args.mode
    if args.log_level:
        settings.log_level = args.log_level
    return settings


# ============= SERVER ENTRY POINT =============


def main(argv: Optional[Sequence[str]] = None) -> None:
    dotenv.load_dotenv()
    settings = load_settings(parse_args(argv))
    configure_logging(level=settings.log_level)

    logger.info(f"MCP Streamable HTTP Server listening on port {settings.port}")
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
