"""Tool catalog and dispatch for the YaCy MCP server."""

from yacy_mcp.tools.arguments import ToolArgumentError, bind_arguments, coerce_int
from yacy_mcp.tools.base import ToolDefinition, ToolResult
from yacy_mcp.tools.dispatcher import ToolDispatcher, count_search_results
from yacy_mcp.tools.registry import YACY_TOOLS, ToolRegistry, create_yacy_registry

__all__ = [
    "YACY_TOOLS",
    "ToolArgumentError",
    "ToolDefinition",
    "ToolDispatcher",
    "ToolRegistry",
    "ToolResult",
    "bind_arguments",
    "coerce_int",
    "count_search_results",
    "create_yacy_registry",
]
