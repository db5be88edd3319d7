"""Static catalog of the YaCy tools.

The registry is built once at startup and shared read-only by the protocol
engine (tools/list) and the dispatcher (tool name resolution).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from yacy_mcp.tools.base import ToolDefinition

DEFAULT_RESULT_COUNT = 10


def _schema(
    properties: dict[str, dict[str, Any]] | None = None,
    required: list[str] | None = None,
) -> dict[str, Any]:
    """Build an object input schema."""
    return {
        "type": "object",
        "properties": properties or {},
        "required": required or [],
    }


YACY_TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="yacy_search",
        description="Search the YaCy index for documents matching a query",
        input_schema=_schema(
            {
                "query": {
                    "type": "string",
                    "description": "Search query string",
                },
                "count": {
                    "type": "integer",
                    "description": "Maximum number of results to return",
                    "default": DEFAULT_RESULT_COUNT,
                },
                "offset": {
                    "type": "integer",
                    "description": "Start offset for pagination",
                    "default": 0,
                },
            },
            ["query"],
        ),
    ),
    ToolDefinition(
        name="yacy_get_status",
        description="Get YaCy server status information",
        input_schema=_schema(),
    ),
    ToolDefinition(
        name="yacy_get_network",
        description="Get YaCy network information",
        input_schema=_schema(),
    ),
    ToolDefinition(
        name="yacy_start_crawl",
        description="Start crawling a URL in YaCy",
        input_schema=_schema(
            {
                "url": {
                    "type": "string",
                    "description": "URL to crawl",
                },
                "depth": {
                    "type": "integer",
                    "description": "Crawl depth",
                    "default": 0,
                },
            },
            ["url"],
        ),
    ),
    ToolDefinition(
        name="yacy_get_index_info",
        description="Get YaCy index information",
        input_schema=_schema(),
    ),
    ToolDefinition(
        name="yacy_get_peers",
        description="Get YaCy peer information",
        input_schema=_schema(),
    ),
    ToolDefinition(
        name="yacy_get_performance",
        description="Get YaCy performance statistics",
        input_schema=_schema(),
    ),
    ToolDefinition(
        name="yacy_get_host_browser",
        description="Browse hosts in the YaCy index",
        input_schema=_schema(
            {
                "host": {
                    "type": "string",
                    "description": "Host or path to browse (empty lists all hosts)",
                    "default": "",
                },
                "count": {
                    "type": "integer",
                    "description": "Maximum number of results",
                    "default": DEFAULT_RESULT_COUNT,
                },
            }
        ),
    ),
    ToolDefinition(
        name="yacy_get_document",
        description="Get document details from the YaCy index",
        input_schema=_schema(
            {
                "url": {
                    "type": "string",
                    "description": "Document URL or YaCy URL hash",
                },
            },
            ["url"],
        ),
    ),
)


class ToolRegistry:
    """Ordered, read-only collection of tool definitions.

    Tools are listed in registration order. Lookups by name never raise;
    an unknown name resolves to None.
    """

    def __init__(self, definitions: Iterable[ToolDefinition]) -> None:
        """Initialize the registry.

        Args:
            definitions: Tool definitions in the order they should be listed.

        Raises:
            ValueError: If a name is duplicated or a description is empty.
        """
        self._tools: tuple[ToolDefinition, ...] = tuple(definitions)
        self._by_name: dict[str, ToolDefinition] = {}

        for tool in self._tools:
            if tool.name in self._by_name:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            if not tool.description.strip():
                raise ValueError(f"Tool {tool.name} has an empty description")
            self._by_name[tool.name] = tool

    def list(self) -> list[ToolDefinition]:
        """Return all tools in registration order."""
        return list(self._tools)

    def resolve(self, name: str) -> ToolDefinition | None:
        """Look up a tool by name.

        Args:
            name: Tool name.

        Returns:
            The tool definition, or None if no tool has that name.
        """
        return self._by_name.get(name)

    def names(self) -> list[str]:
        """Return tool names in registration order."""
        return [tool.name for tool in self._tools]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._tools)


def create_yacy_registry() -> ToolRegistry:
    """Create the registry holding the YaCy tool catalog."""
    return ToolRegistry(YACY_TOOLS)
