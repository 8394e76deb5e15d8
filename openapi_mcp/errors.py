"""
Exceptions for openapi-mcp-server.

Error kinds and where they surface:

- ConfigurationError: missing/invalid settings at startup (fatal)
- SpecLoadError: unreachable URL, unreadable file, unparseable body,
  or a document without `paths` (fatal at startup)
- ToolNotFoundError: unknown tool id/name at dispatch time (per call)
- UpstreamRequestError: non-2xx or transport failure from the wrapped API,
  including the login/refresh exchanges (per call)

Only the startup errors stop the server; dispatch errors are local to
the call that raised them.
"""

from __future__ import annotations

from collections.abc import Sequence


class OpenAPIMCPError(Exception):
    """Base exception for openapi-mcp-server."""


class ConfigurationError(OpenAPIMCPError):
    """Raised when required settings are missing or malformed."""


class SpecLoadError(OpenAPIMCPError):
    """Raised when the OpenAPI document cannot be loaded or has no paths."""

    def __init__(self, message: str, *, source: str | None = None):
        super().__init__(message)
        self.source = source

    def __str__(self) -> str:
        if self.source:
            return f"{self.args[0]} (source={self.source})"
        return self.args[0]


class DispatchError(OpenAPIMCPError):
    """Base class for failures scoped to a single tool call."""


class ToolNotFoundError(DispatchError):
    """Raised when a tool id or display name is not in the index."""

    def __init__(
        self,
        requested: str,
        *,
        known_ids: Sequence[str] = (),
        known_names: Sequence[str] = (),
    ):
        self.requested = requested
        self.known_ids = tuple(known_ids)
        self.known_names = tuple(known_names)
        super().__init__(
            f"Tool not found: {requested}. "
            f"Available ids: {list(self.known_ids)}. "
            f"Available names: {list(self.known_names)}"
        )


class UpstreamRequestError(DispatchError):
    """Raised when the wrapped API answers non-2xx or cannot be reached."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        status_text: str | None = None,
        response_body: str | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text
        self.response_body = response_body
        self.retryable = retryable

    def __str__(self) -> str:
        parts = [f"API request failed: {self.args[0]}"]
        if self.status_code is not None:
            status = f"(status={self.status_code}"
            if self.status_text:
                status += f" {self.status_text}"
            parts.append(status + ")")
        if self.response_body:
            parts.append(f"- {self.response_body}")
        return " ".join(parts)
