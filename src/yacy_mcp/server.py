"""MCP Server - per-message protocol engine.

Parses each incoming line as JSON-RPC, routes it by method name and
serializes exactly one response per request (none for notifications).
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from typing import Any

from yacy_mcp.protocol.jsonrpc import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    format_error,
    format_response,
    parse_message,
)
from yacy_mcp.protocol.lifecycle import LifecycleManager
from yacy_mcp.protocol.tools import ToolsHandler
from yacy_mcp.tools.dispatcher import ToolDispatcher
from yacy_mcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

INITIALIZED_NOTIFICATION = "notifications/initialized"


class MCPServer:
    """MCP Server implementation.

    Handles:
    - Lifecycle (initialize / notifications/initialized)
    - Tool listing and execution
    - ping

    Every failure is answered with a structured JSON-RPC error; nothing
    raised while handling a message escapes handle_message().
    """

    def __init__(
        self,
        registry: ToolRegistry,
        dispatcher: ToolDispatcher,
        server_name: str = "yacy-mcp",
        server_version: str = "1.0.0",
    ) -> None:
        """Initialize the server.

        Args:
            registry: Tool catalog.
            dispatcher: Dispatcher executing tool calls.
            server_name: Name reported in serverInfo.
            server_version: Version reported in serverInfo.
        """
        self._registry = registry
        self._dispatcher = dispatcher
        self._lifecycle = LifecycleManager(
            server_info={"name": server_name, "version": server_version}
        )
        self._tools_handler = ToolsHandler(registry, dispatcher)

        self._methods: dict[str, Callable[[dict[str, Any]], Any]] = {
            "initialize": self._lifecycle.handle_initialize,
            "tools/list": lambda params: self._tools_handler.handle_list().to_dict(),
            "tools/call": lambda params: self._tools_handler.handle_call(params).to_dict(),
            "ping": lambda params: {},
        }

    @property
    def lifecycle(self) -> LifecycleManager:
        """Return the lifecycle manager."""
        return self._lifecycle

    def list_tools(self) -> list[dict[str, Any]]:
        """List all registered tools.

        Returns:
            List of tool definitions in MCP format.
        """
        return self._tools_handler.handle_list().tools

    def handle_message(self, raw_message: str) -> str | None:
        """Handle an incoming JSON-RPC message.

        Args:
            raw_message: Raw JSON-RPC message string.

        Returns:
            Response string or None for notifications.
        """
        try:
            try:
                message = parse_message(raw_message)
            except JsonRpcError as e:
                logger.warning("Rejected message: %s", e)
                return format_error(e.msg_id, e.code, str(e))

            if isinstance(message, JsonRpcNotification):
                self._handle_notification(message.method)
                return None
            return self._handle_request(message)
        except Exception as e:
            logger.exception("Unhandled error while processing message")
            return format_error(str(uuid.uuid4()), INTERNAL_ERROR, f"Internal error: {e}")

    def _handle_notification(self, method: str) -> None:
        """Handle a notification (no response).

        Args:
            method: Notification method name.
        """
        if method == INITIALIZED_NOTIFICATION:
            self._lifecycle.handle_initialized()
        else:
            logger.debug("Ignoring notification %s", method)

    def _handle_request(self, request: JsonRpcRequest) -> str | None:
        """Handle a request and return response.

        Args:
            request: The request to handle.

        Returns:
            JSON-RPC response string, or None when the method is a
            notification sent with an id.
        """
        method = request.method
        msg_id = request.id
        logger.debug("Received request: method=%s, id=%r", method, msg_id)

        if method == INITIALIZED_NOTIFICATION:
            self._handle_notification(method)
            return None

        handler = self._methods.get(method)
        if handler is None:
            return format_error(msg_id, METHOD_NOT_FOUND, f"Method not found: {method}")

        try:
            result = handler(request.params or {})
            return format_response(msg_id, result)
        except JsonRpcError as e:
            return format_error(msg_id, e.code, str(e))
        except Exception as e:
            logger.exception("Error handling %s", method)
            return format_error(msg_id, INTERNAL_ERROR, f"Internal error: {e}")

    def close(self) -> None:
        """Close the server and clean up resources."""
        self._dispatcher.close()

    def __enter__(self) -> MCPServer:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
