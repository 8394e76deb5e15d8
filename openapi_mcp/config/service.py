"""
Settings Loader.

Combines CLI flags and environment variables, with CLI taking precedence:

    --api-base-url / -u   API_BASE_URL        (required)
    --openapi-spec / -s   OPENAPI_SPEC_PATH   (required)
    --headers / -H        API_HEADERS         "key1:value1,key2:value2"
    --name / -n           SERVER_NAME
    --version / -v        SERVER_VERSION
    --username            API_USERNAME
    --password            API_PASSWORD
    --client-id           API_CLIENT_ID
    --timeout             API_TIMEOUT
    --log-level           LOG_LEVEL
"""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Mapping, Sequence

from pydantic import ValidationError

from openapi_mcp.config.schemas import ServerSettings
from openapi_mcp.errors import ConfigurationError

logger = logging.getLogger(__name__)


def parse_headers(header_str: str | None) -> dict[str, str]:
    """
    Parse `key1:value1,key2:value2` into a header dict.

    Each pair is split on its first colon; pairs with an empty key or
    value are ignored.
    """
    headers: dict[str, str] = {}
    if not header_str:
        return headers

    for pair in header_str.split(","):
        key, _, value = pair.partition(":")
        key, value = key.strip(), value.strip()
        if key and value:
            headers[key] = value
    return headers


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openapi-mcp-server",
        description="Expose an OpenAPI-described HTTP API as MCP tools over stdio",
    )
    parser.add_argument("-u", "--api-base-url", help="Base URL for the API")
    parser.add_argument("-s", "--openapi-spec", help="Path or URL to OpenAPI specification")
    parser.add_argument("-H", "--headers", help="API headers in format 'key1:value1,key2:value2'")
    parser.add_argument("-n", "--name", help="Server name")
    parser.add_argument("-v", "--version", help="Server version")
    parser.add_argument("--username", help="Username for the credential exchange")
    parser.add_argument("--password", help="Password for the credential exchange")
    parser.add_argument("--client-id", help="Client id sent with the login request")
    parser.add_argument("--timeout", type=float, help="Outbound request timeout in seconds")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...)")
    return parser


def load_settings(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ServerSettings:
    """
    Build ServerSettings from CLI flags and environment variables.

    Args:
        argv: CLI arguments (defaults to sys.argv[1:])
        environ: Environment mapping (defaults to os.environ)

    Raises:
        ConfigurationError: If the base URL or spec location is missing,
            or a value fails validation
    """
    env = os.environ if environ is None else environ
    args = build_parser().parse_args(argv)

    def pick(cli_value, env_name: str):
        return cli_value if cli_value not in (None, "") else env.get(env_name) or None

    api_base_url = pick(args.api_base_url, "API_BASE_URL")
    openapi_spec = pick(args.openapi_spec, "OPENAPI_SPEC_PATH")

    if not api_base_url:
        raise ConfigurationError("API base URL is required (--api-base-url or API_BASE_URL)")
    if not openapi_spec:
        raise ConfigurationError("OpenAPI spec is required (--openapi-spec or OPENAPI_SPEC_PATH)")

    values = {
        "api_base_url": api_base_url,
        "openapi_spec": openapi_spec,
        "headers": parse_headers(pick(args.headers, "API_HEADERS")),
        "name": pick(args.name, "SERVER_NAME"),
        "version": pick(args.version, "SERVER_VERSION"),
        "username": pick(args.username, "API_USERNAME"),
        "password": pick(args.password, "API_PASSWORD"),
        "client_id": pick(args.client_id, "API_CLIENT_ID"),
        "timeout": pick(args.timeout, "API_TIMEOUT"),
        "log_level": pick(args.log_level, "LOG_LEVEL"),
    }

    try:
        # Unset values fall back to model defaults
        return ServerSettings(**{k: v for k, v in values.items() if v is not None})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
