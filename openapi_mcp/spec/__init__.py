"""
Spec Compiler.

Loads an OpenAPI 3.x document and compiles it into an immutable ToolIndex.

Usage:
    from openapi_mcp.spec import compile_spec, load_spec

    document = await load_spec("./openapi.json")
    index = compile_spec(document)
"""

from .compiler import clean_path, compile_spec, derive_tool_id, is_excluded
from .loader import load_spec, parse_document

__all__ = [
    "clean_path",
    "compile_spec",
    "derive_tool_id",
    "is_excluded",
    "load_spec",
    "parse_document",
]
