"""Handlers for the tools/list and tools/call methods."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from yacy_mcp.protocol.jsonrpc import INVALID_REQUEST, JsonRpcError
from yacy_mcp.tools.base import ToolResult
from yacy_mcp.tools.dispatcher import ToolDispatcher
from yacy_mcp.tools.registry import ToolRegistry


@dataclass
class ToolsListResult:
    """Payload of a tools/list response."""

    tools: list[dict[str, Any]]

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format."""
        return {"tools": self.tools}


class ToolsHandler:
    """Serves the catalog and turns tools/call params into dispatcher calls.

    A call naming an unknown tool is still a successful JSON-RPC exchange;
    only a call with no usable tool name is a protocol error.
    """

    def __init__(self, registry: ToolRegistry, dispatcher: ToolDispatcher) -> None:
        """Initialize the handler.

        Args:
            registry: Tool catalog served by tools/list.
            dispatcher: Executes tools/call requests.
        """
        self._registry = registry
        self._dispatcher = dispatcher

    def handle_list(self) -> ToolsListResult:
        """Return every registered tool in registration order."""
        return ToolsListResult(tools=[tool.to_dict() for tool in self._registry.list()])

    def handle_call(self, params: dict[str, Any]) -> ToolResult:
        """Run the tool named in a tools/call request.

        Args:
            params: Request params holding 'name' and optional 'arguments'.
                Arguments that are absent or not an object count as empty.

        Returns:
            The tool result, successful or not.

        Raises:
            JsonRpcError: If 'name' is missing, empty or not a string.
        """
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise JsonRpcError(INVALID_REQUEST, "Missing tool name")

        arguments = params.get("arguments")
        if not isinstance(arguments, dict):
            arguments = {}

        return self._dispatcher.execute(name, arguments)
