"""
MCP Server binding.

Wires the translation engine to the Model Context Protocol over stdio:

    tools/list  -> ToolIndex descriptors, in document order
    tools/call  -> CallDispatcher.dispatch(tool_id=...) when the name is a
                   tool id, else dispatch(name=...)

Startup order:
    1. Load the OpenAPI document (SpecLoadError is fatal)
    2. Compile it into an immutable ToolIndex
    3. Build the dispatcher (and TokenManager when credentials are set)
    4. Serve stdio

HTTP Client Lifecycle:
    A caller-provided client is used as-is and never closed. Otherwise the
    server creates one (bounded by settings.timeout) and closes it in
    `aclose()`.

Usage:
    server = OpenAPIMCPServer(settings)
    await server.run_stdio()
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx
import mcp.types as types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from openapi_mcp.config.schemas import ServerSettings
from openapi_mcp.dispatch.auth import TokenManager
from openapi_mcp.dispatch.dispatcher import CallDispatcher
from openapi_mcp.errors import DispatchError
from openapi_mcp.spec.compiler import compile_spec
from openapi_mcp.spec.loader import SpecSource, load_spec
from openapi_mcp.tools.base import ToolDescriptor
from openapi_mcp.tools.index import ToolIndex

logger = logging.getLogger(__name__)


def to_mcp_tool(descriptor: ToolDescriptor) -> types.Tool:
    """Convert a descriptor into the SDK's Tool model."""
    schema = descriptor.to_mcp_schema()
    return types.Tool(
        name=schema["name"],
        description=schema["description"],
        inputSchema=schema["inputSchema"],
        annotations=types.ToolAnnotations(**schema.get("annotations", {})),
    )


class OpenAPIMCPServer:
    """
    MCP server exposing one OpenAPI document as tools.

    The ToolIndex is compiled once in `start()`; `rebuild()` recompiles from
    the same source and swaps the index in a single assignment, so calls
    already in flight finish against the index they started with.
    """

    def __init__(
        self,
        settings: ServerSettings,
        *,
        document: SpecSource | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the server.

        Args:
            settings: Server settings
            document: Spec source overriding settings.openapi_spec (e.g. an
                      already-parsed dict)
            http_client: Optional shared HTTP client (caller manages lifecycle)
        """
        self._settings = settings
        self._source: SpecSource = document if document is not None else settings.openapi_spec
        self._shared_client = http_client
        self._owned_client: httpx.AsyncClient | None = None
        self._token_manager: TokenManager | None = None
        self._dispatcher: CallDispatcher | None = None

        self._server = Server(settings.name, version=settings.version)
        self._server.list_tools()(self.list_tools)
        self._server.call_tool(validate_input=False)(self.call_tool)

    @property
    def settings(self) -> ServerSettings:
        return self._settings

    @property
    def index(self) -> ToolIndex:
        """The compiled index (start() must have run)."""
        return self.dispatcher.index

    @property
    def dispatcher(self) -> CallDispatcher:
        if self._dispatcher is None:
            raise RuntimeError("Server not started: call start() first")
        return self._dispatcher

    @property
    def token_manager(self) -> TokenManager | None:
        return self._token_manager

    def _get_client(self) -> httpx.AsyncClient:
        if self._shared_client is not None:
            return self._shared_client
        if self._owned_client is None or self._owned_client.is_closed:
            self._owned_client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._owned_client

    async def start(self) -> ToolIndex:
        """
        Load and compile the document, then build the dispatcher.

        Raises:
            SpecLoadError: If the document cannot be loaded or has no paths
        """
        client = self._get_client()
        settings = self._settings

        auth = settings.auth_config()
        if auth is not None and self._token_manager is None:
            self._token_manager = TokenManager(
                auth,
                base_url=settings.api_base_url,
                http_client=client,
                headers=settings.headers,
            )

        return await self.rebuild()

    async def rebuild(self) -> ToolIndex:
        """
        Recompile the document and swap in a fresh index.

        The Auth State survives a rebuild.
        """
        client = self._get_client()
        document = await load_spec(
            self._source, http_client=client, timeout=self._settings.timeout
        )
        index = compile_spec(document)

        self._dispatcher = CallDispatcher(
            index,
            self._settings.api_base_url,
            http_client=client,
            headers=self._settings.headers,
            token_manager=self._token_manager,
        )
        logger.info(f"[mcp_server] Serving {len(index)} tools from {self._describe_source()}")
        return index

    async def list_tools(self) -> list[types.Tool]:
        """Handle tools/list."""
        return [to_mcp_tool(descriptor) for descriptor in self.index]

    async def call_tool(
        self,
        name: str,
        arguments: Mapping[str, Any] | None,
    ) -> list[types.TextContent]:
        """
        Handle tools/call.

        MCP carries a single `name`: a tool id matches first, otherwise it is
        looked up as a display name. DispatchError is re-raised after
        logging; the SDK reports it to the caller as an error result
        carrying the message.
        """
        dispatcher = self.dispatcher
        try:
            if name.strip() in dispatcher.index:
                result = await dispatcher.dispatch(tool_id=name, arguments=arguments)
            else:
                result = await dispatcher.dispatch(name=name, arguments=arguments)
        except DispatchError as e:
            logger.warning(f"[mcp_server] Tool call '{name}' failed: {e}")
            raise

        return [types.TextContent(type="text", text=result.text)]

    async def run_stdio(self) -> None:
        """Compile the index, then serve MCP over stdio until EOF."""
        try:
            await self.start()
            async with stdio_server() as (read_stream, write_stream):
                logger.info(f"[mcp_server] {self._settings.name} running on stdio")
                await self._server.run(
                    read_stream,
                    write_stream,
                    self._server.create_initialization_options(),
                )
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        """Close the owned HTTP client (never a shared one)."""
        if self._owned_client is not None:
            await self._owned_client.aclose()
            self._owned_client = None

    def _describe_source(self) -> str:
        if isinstance(self._source, Mapping):
            return "in-memory document"
        return str(self._source)
