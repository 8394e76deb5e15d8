"""
openapi-mcp-server - Expose any OpenAPI-described HTTP API as MCP tools.

The package is split into two halves:

- **Spec Compiler** (`openapi_mcp.spec`): turns an OpenAPI 3.x document into
  an immutable, ordered index of tool descriptors.
- **Call Dispatcher** (`openapi_mcp.dispatch`): rebuilds an HTTP request from a
  tool id (or display name) and a loose argument bag, drives the optional
  login/refresh token lifecycle, and relays the upstream response.

Quick Start:
    >>> from openapi_mcp.spec import compile_spec, load_spec
    >>> from openapi_mcp.dispatch import CallDispatcher
    >>>
    >>> document = await load_spec("https://api.example.com/openapi.json")
    >>> index = compile_spec(document)
    >>> async with httpx.AsyncClient(timeout=30.0) as client:
    ...     dispatcher = CallDispatcher(index, "https://api.example.com", http_client=client)
    ...     result = await dispatcher.dispatch(tool_id="GET-users-id", arguments={"id": "42"})
"""

__version__ = "0.1.0"
__license__ = "MIT"

from openapi_mcp.dispatch import CallDispatcher, TokenManager
from openapi_mcp.errors import (
    ConfigurationError,
    DispatchError,
    OpenAPIMCPError,
    SpecLoadError,
    ToolNotFoundError,
    UpstreamRequestError,
)
from openapi_mcp.spec import compile_spec, load_spec
from openapi_mcp.tools import ToolDescriptor, ToolIndex, ToolResult

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Spec Compiler
    "compile_spec",
    "load_spec",
    "ToolDescriptor",
    "ToolIndex",
    # Call Dispatcher
    "CallDispatcher",
    "TokenManager",
    "ToolResult",
    # Errors
    "OpenAPIMCPError",
    "ConfigurationError",
    "SpecLoadError",
    "DispatchError",
    "ToolNotFoundError",
    "UpstreamRequestError",
]
