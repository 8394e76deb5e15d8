"""
Tool Descriptor and Result Types (MCP-Aligned).

This module defines the value types shared by the compiler and dispatcher:
- ToolDescriptor: compiled, invokable form of one OpenAPI operation
- ToolResult: text result of a dispatch
- ToolAnnotations: behavioral hints derived from the HTTP verb

MCP Alignment:
    - ToolDescriptor exposes name, description, inputSchema
    - Annotations are advisory hints only

Usage:
    descriptor = ToolDescriptor(
        id="GET-users-id",
        display_name="getUser",
        description="Fetch one user",
        method="GET",
        path_template="/users/{id}",
        input_schema={
            "type": "object",
            "properties": {"id": {"type": "string", "description": "id parameter"}},
            "required": ["id"],
        },
    )

    descriptor.to_mcp_schema()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class ToolAnnotations:
    """
    MCP behavioral hints, derived from the operation's HTTP verb.

    GET/HEAD/OPTIONS are read-only, only DELETE is destructive, and every
    tool reaches the wrapped API. Clients treat these as hints only.
    """

    title: str | None = None
    read_only_hint: bool = False
    destructive_hint: bool = True
    idempotent_hint: bool = False
    open_world_hint: bool = False

    @classmethod
    def for_method(cls, method: str, *, title: str | None = None) -> ToolAnnotations:
        """Derive hints from an HTTP verb."""
        method = method.upper()
        return cls(
            title=title,
            read_only_hint=method in ("GET", "HEAD", "OPTIONS"),
            destructive_hint=method == "DELETE",
            idempotent_hint=method in ("GET", "PUT", "DELETE"),
            open_world_hint=True,  # Always calls the wrapped API
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {}

        if self.title is not None:
            result["title"] = self.title
        if self.read_only_hint:
            result["readOnlyHint"] = True
        if not self.destructive_hint:
            result["destructiveHint"] = False
        if self.idempotent_hint:
            result["idempotentHint"] = True
        if self.open_world_hint:
            result["openWorldHint"] = True

        return result


@dataclass(frozen=True, slots=True)
class ToolResult:
    """
    Result of a successful dispatch.

    `text` is the upstream response body, pretty-printed as JSON. Failures
    are raised as DispatchError rather than returned.
    """

    text: str

    @classmethod
    def success(cls, text: str) -> ToolResult:
        return cls(text=text)


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """
    Compiled, invokable representation of one OpenAPI operation.

    Attributes:
        id: Derived from method + cleaned path (e.g. "GET-users-id");
            unique key in the ToolIndex
        display_name: operationId, summary, or the id; not guaranteed unique
        description: Operation description or a synthesized fallback
        method: Upper-case HTTP verb (same as the id prefix)
        path_template: Original path with {param} placeholders
        input_schema: JSON Schema object for the argument bag
    """

    id: str
    display_name: str
    description: str
    method: str
    path_template: str
    input_schema: dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    @property
    def annotations(self) -> ToolAnnotations:
        """Tool annotations based on HTTP method."""
        return ToolAnnotations.for_method(self.method, title=self.display_name)

    def to_mcp_schema(self) -> dict[str, Any]:
        """
        Convert to MCP tool schema.

        The display name goes out as the MCP `name`, which is what callers
        send back on tools/call.
        """
        schema: dict[str, Any] = {
            "name": self.display_name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }

        annotations = self.annotations.to_dict()
        if annotations:
            schema["annotations"] = annotations

        return schema

    def __repr__(self) -> str:
        return f"<ToolDescriptor {self.id} ({self.display_name})>"
