"""MCP Protocol layer for JSON-RPC communication."""

from yacy_mcp.protocol.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    format_error,
    format_response,
    parse_message,
)
from yacy_mcp.protocol.lifecycle import (
    MCP_PROTOCOL_VERSION,
    LifecycleManager,
    LifecycleState,
)
from yacy_mcp.protocol.tools import ToolsHandler, ToolsListResult
from yacy_mcp.protocol.transport import StdioTransport

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_REQUEST",
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcRequest",
    "LifecycleManager",
    "LifecycleState",
    "MCP_PROTOCOL_VERSION",
    "METHOD_NOT_FOUND",
    "StdioTransport",
    "ToolsHandler",
    "ToolsListResult",
    "format_error",
    "format_response",
    "parse_message",
]
