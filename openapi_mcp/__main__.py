"""
openapi-mcp-server entry point.

    python -m openapi_mcp --api-base-url https://api.example.com \\
        --openapi-spec ./openapi.json
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Sequence

from openapi_mcp.config import load_settings
from openapi_mcp.errors import ConfigurationError, SpecLoadError
from openapi_mcp.server import OpenAPIMCPServer

logger = logging.getLogger("openapi_mcp")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Log to stderr; stdout carries the stdio transport."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def main(argv: Sequence[str] | None = None) -> int:
    try:
        settings = load_settings(argv)
    except ConfigurationError as e:
        configure_logging()
        logger.error(f"Failed to start server: {e}")
        return 1

    configure_logging(settings.log_level)
    server = OpenAPIMCPServer(settings)

    try:
        asyncio.run(server.run_stdio())
    except (ConfigurationError, SpecLoadError) as e:
        logger.error(f"Failed to start server: {e}", exc_info=True)
        return 1
    except KeyboardInterrupt:
        logger.info("Shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
