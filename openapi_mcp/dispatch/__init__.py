"""
Call Dispatcher.

Resolves tool calls against a compiled ToolIndex, drives the optional
login/refresh credential lifecycle, and executes the HTTP request.
"""

from .auth import AuthConfig, AuthPhase, AuthState, TokenManager
from .dispatcher import CallDispatcher, method_from_id, substitute_path
from .encoding import (
    METHOD_OVERRIDE_FIELD,
    ValueKind,
    classify,
    encode_multipart,
    encode_query,
)

__all__ = [
    "AuthConfig",
    "AuthPhase",
    "AuthState",
    "TokenManager",
    "CallDispatcher",
    "method_from_id",
    "substitute_path",
    "METHOD_OVERRIDE_FIELD",
    "ValueKind",
    "classify",
    "encode_multipart",
    "encode_query",
]
