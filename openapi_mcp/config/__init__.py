"""
openapi-mcp-server Configuration

CLI flags and environment variables, validated with pydantic.
"""

from .schemas import ServerSettings
from .service import load_settings, parse_headers

__all__ = [
    "ServerSettings",
    "load_settings",
    "parse_headers",
]
