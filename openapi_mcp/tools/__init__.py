"""
Tool value types.

A ToolDescriptor is the compiled, invokable form of one OpenAPI operation;
a ToolIndex is the ordered, read-only collection the dispatcher resolves
calls against.
"""

from .base import ToolAnnotations, ToolDescriptor, ToolResult
from .index import ToolIndex

__all__ = [
    "ToolAnnotations",
    "ToolDescriptor",
    "ToolIndex",
    "ToolResult",
]
