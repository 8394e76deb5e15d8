"""
Tool Index.

The index is the compiled, read-only view of a document's operations:
- Ordered descriptors (document encounter order)
- Lookup by id (exact)
- Lookup by display name (first match wins)

Design Principle:
    The index is built once per process start (or per explicit rebuild)
    and never mutated afterward. It is passed by reference into the
    dispatcher instead of living in module-level state, so several
    documents can be compiled side by side in one process.

Usage:
    index = ToolIndex([descriptor_a, descriptor_b])

    index.get("GET-users-id")
    index.find_by_name("getUser")
    [d.to_mcp_schema() for d in index]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from .base import ToolDescriptor

logger = logging.getLogger(__name__)


class ToolIndex:
    """
    Immutable collection of ToolDescriptors.

    Descriptors sharing an id collapse last-write-wins: the id keeps the
    position where it was first seen and holds the latest descriptor.

    Example:
        index = ToolIndex(descriptors)

        tool = index.get("GET-users-id")
        tool = index.find_by_name("List users")
        ids = index.ids()
    """

    __slots__ = ("_by_id", "_descriptors")

    def __init__(self, descriptors: Iterable[ToolDescriptor] = ()) -> None:
        by_id: dict[str, ToolDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.id in by_id:
                logger.warning(
                    f"[tool_index] Duplicate tool id '{descriptor.id}': "
                    f"{by_id[descriptor.id].path_template} replaced by "
                    f"{descriptor.path_template}"
                )
            by_id[descriptor.id] = descriptor

        self._by_id: Mapping[str, ToolDescriptor] = MappingProxyType(by_id)
        self._descriptors: tuple[ToolDescriptor, ...] = tuple(by_id.values())

    @property
    def descriptors(self) -> tuple[ToolDescriptor, ...]:
        """Descriptors in document encounter order."""
        return self._descriptors

    @property
    def by_id(self) -> Mapping[str, ToolDescriptor]:
        """Read-only id -> descriptor mapping."""
        return self._by_id

    def get(self, tool_id: str) -> ToolDescriptor | None:
        """
        Get a descriptor by exact id.

        Args:
            tool_id: Tool id

        Returns:
            ToolDescriptor or None if not found
        """
        return self._by_id.get(tool_id)

    def find_by_name(self, name: str) -> ToolDescriptor | None:
        """
        Get the first descriptor whose display name equals `name`.

        Display names are not unique; later descriptors with the same
        name are unreachable through this lookup.
        """
        for descriptor in self._descriptors:
            if descriptor.display_name == name:
                return descriptor
        return None

    def ids(self) -> list[str]:
        """List all tool ids in order."""
        return [d.id for d in self._descriptors]

    def names(self) -> list[str]:
        """List all display names in order (may contain duplicates)."""
        return [d.display_name for d in self._descriptors]

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, tool_id: object) -> bool:
        return tool_id in self._by_id

    def __repr__(self) -> str:
        return f"<ToolIndex tools={self.ids()}>"
