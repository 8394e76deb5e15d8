"""
Call Dispatcher.

Turns a (tool id | display name, argument bag) pair into one outbound
HTTP request against the wrapped API and maps the response back into a
ToolResult.

Request shaping:
    GET        every argument -> query string (arrays comma-joined,
               None omitted), sent as GET
    write verb every argument -> multipart form (arrays as repeated
               fields, objects as JSON), plus `__method=<VERB>`, always
               sent as POST (verb tunnelling expected by the wrapped API)

In both cases `{name}` placeholders in the original path template are
substituted from the same argument bag; a missing argument becomes "".

Usage:
    dispatcher = CallDispatcher(
        index,
        "https://api.example.com",
        headers={"X-Api-Key": "..."},
        http_client=client,
    )

    result = await dispatcher.dispatch(tool_id="GET-users-id", arguments={"id": 42})
    result = await dispatcher.dispatch(name="getUser", arguments={"id": 42})
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

import httpx

from openapi_mcp.dispatch.auth import TokenManager
from openapi_mcp.dispatch.encoding import encode_multipart, encode_query, to_path_value
from openapi_mcp.dispatch.http import send
from openapi_mcp.errors import ToolNotFoundError
from openapi_mcp.tools.base import ToolDescriptor, ToolResult
from openapi_mcp.tools.index import ToolIndex

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{([^}]+)\}")


def method_from_id(tool_id: str) -> str:
    """HTTP verb encoded as the id prefix (up to the first hyphen)."""
    return tool_id.split("-", 1)[0].upper()


def substitute_path(template: str, arguments: Mapping[str, Any]) -> str:
    """Replace every `{name}` in `template` with the argument's string form."""
    return _PLACEHOLDER.sub(
        lambda match: to_path_value(arguments.get(match.group(1))), template
    )


def format_body(response: httpx.Response) -> str:
    """Pretty-print a response body (JSON when it parses, raw text otherwise)."""
    try:
        data = response.json()
    except ValueError:
        data = response.text
    return json.dumps(data, indent=2, ensure_ascii=False)


class CallDispatcher:
    """
    Resolves tool calls against a frozen ToolIndex and executes them.

    The index is read-only and shared; the optional TokenManager holds the
    only mutable state.

    HTTP Client Lifecycle:
        The dispatcher never creates or closes clients. The caller passes
        one in and owns it.
    """

    def __init__(
        self,
        index: ToolIndex,
        base_url: str,
        *,
        http_client: httpx.AsyncClient,
        headers: dict[str, str] | None = None,
        token_manager: TokenManager | None = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            index: Compiled tool index
            base_url: API base URL
            http_client: Client for business calls (caller manages lifecycle)
            headers: Static headers for every call
            token_manager: Drives the access-token header when auth is configured
        """
        self._index = index
        self._base_url = base_url.rstrip("/")
        self._client = http_client
        self._headers = dict(headers or {})
        self._token_manager = token_manager

    @property
    def index(self) -> ToolIndex:
        return self._index

    def resolve(
        self,
        *,
        tool_id: str | None = None,
        name: str | None = None,
    ) -> ToolDescriptor:
        """
        Look up a descriptor by id (preferred) or display name.

        Raises:
            ToolNotFoundError: If nothing matches
        """
        descriptor: ToolDescriptor | None = None
        requested = ""

        if tool_id:
            requested = tool_id.strip()
            descriptor = self._index.get(requested)
        elif name:
            requested = name
            descriptor = self._index.find_by_name(name)

        if descriptor is None:
            known = ", ".join(f"{d.id} ({d.display_name})" for d in self._index)
            logger.warning(f"[dispatcher] Tool not found: {requested!r}. Available tools: {known}")
            raise ToolNotFoundError(
                requested,
                known_ids=self._index.ids(),
                known_names=self._index.names(),
            )
        return descriptor

    async def dispatch(
        self,
        *,
        tool_id: str | None = None,
        name: str | None = None,
        arguments: Mapping[str, Any] | None = None,
    ) -> ToolResult:
        """
        Execute one tool call.

        Args:
            tool_id: Explicit tool id (takes precedence)
            name: Display name, used when no id is given
            arguments: Argument bag

        Returns:
            ToolResult with the pretty-printed response body

        Raises:
            ToolNotFoundError: Unknown id/name
            UpstreamRequestError: Non-2xx or transport failure (including
                the login/refresh exchange)
        """
        descriptor = self.resolve(tool_id=tool_id, name=name)
        arguments = dict(arguments or {})

        method = method_from_id(descriptor.id)
        url = f"{self._base_url}{substitute_path(descriptor.path_template, arguments)}"

        headers = dict(self._headers)
        if self._token_manager is not None:
            headers.update(await self._token_manager.auth_headers())

        logger.info(
            f"[dispatcher:{descriptor.id}] {method} {url} args={list(arguments.keys())}"
        )

        if method == "GET":
            response = await send(
                self._client,
                "GET",
                url,
                params=encode_query(arguments),
                headers=headers,
            )
        else:
            response = await send(
                self._client,
                "POST",
                url,
                files=encode_multipart(arguments, method),
                headers=headers,
            )

        logger.info(f"[dispatcher:{descriptor.id}] Response: {response.status_code}")
        return ToolResult.success(format_body(response))
