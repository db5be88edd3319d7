"""Tool dispatcher - routes tool calls to the YaCy client."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from typing import Any

from yacy_mcp.client import YaCyClient
from yacy_mcp.exceptions import YaCyError
from yacy_mcp.history import HistoryStore
from yacy_mcp.tools.arguments import ToolArgumentError, bind_arguments
from yacy_mcp.tools.base import ToolResult
from yacy_mcp.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

CRAWL_STARTED = "started"


def count_search_results(document: Any) -> int:
    """Count result items in a yacysearch.json document.

    Args:
        document: Decoded search response.

    Returns:
        Number of items across all channels, 0 if the shape is unexpected.
    """
    if not isinstance(document, dict):
        return 0

    total = 0
    for channel in document.get("channels") or []:
        if isinstance(channel, dict) and isinstance(channel.get("items"), list):
            total += len(channel["items"])
    return total


class ToolDispatcher:
    """Routes tool calls to the YaCy client.

    Resolves tool names through the registry, validates arguments against
    the tool schema, invokes the bound client operation and normalizes the
    outcome into a ToolResult. Collaborator failures never escape.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        client: YaCyClient,
        history: HistoryStore | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            registry: Tool catalog.
            client: YaCy API client.
            history: Optional history sink for searches and crawls.

        Raises:
            ValueError: If a registered tool has no handler.
        """
        self._registry = registry
        self._client = client
        self._history = history
        self._handlers = self._get_handler_registry()

        unbound = [name for name in registry.names() if name not in self._handlers]
        if unbound:
            raise ValueError(f"No handler for tools: {', '.join(unbound)}")

    @property
    def registry(self) -> ToolRegistry:
        """Return the tool registry."""
        return self._registry

    def _get_handler_registry(self) -> dict[str, Callable[[dict[str, Any]], Any]]:
        """Map tool names to handler methods."""
        return {
            "yacy_search": self._search,
            "yacy_get_status": lambda args: self._client.get_status(),
            "yacy_get_network": lambda args: self._client.get_network_info(),
            "yacy_start_crawl": self._start_crawl,
            "yacy_get_index_info": lambda args: self._client.get_index_info(),
            "yacy_get_peers": lambda args: self._client.get_peers(),
            "yacy_get_performance": lambda args: self._client.get_performance(),
            "yacy_get_host_browser": lambda args: self._client.get_host_browser(
                args["host"], args["count"]
            ),
            "yacy_get_document": lambda args: self._client.get_document(args["url"]),
        }

    def execute(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Execute a tool by name.

        Args:
            name: Name of the tool to call.
            arguments: Raw tool arguments.

        Returns:
            ToolResult with the serialized document, or is_error set with
            the failure message.
        """
        tool = self._registry.resolve(name)
        if tool is None:
            return ToolResult.error(f"Unknown tool: {name}")

        try:
            bound = bind_arguments(tool, arguments)
        except ToolArgumentError as e:
            logger.info("Rejected call to %s: %s", name, e)
            return ToolResult.error(str(e))

        logger.info("Executing tool %s with args %s", name, bound)

        try:
            document = self._handlers[name](bound)
            text = json.dumps(document) if document is not None else ""
        except YaCyError as e:
            logger.warning("Tool %s failed: %s", name, e)
            return ToolResult.error(f"Error executing tool {name}: {e}")
        except Exception as e:
            logger.exception("Unexpected error in tool %s", name)
            return ToolResult.error(f"Error executing tool {name}: {e}")

        return ToolResult.text(text)

    def _search(self, args: dict[str, Any]) -> Any:
        query = args["query"]
        started = time.monotonic()
        document = self._client.search(query, args["count"], args["offset"])
        elapsed_ms = int((time.monotonic() - started) * 1000)

        if self._history is not None:
            try:
                self._history.log_search(query, count_search_results(document), elapsed_ms)
            except Exception:
                logger.warning("Search history not recorded for %r", query, exc_info=True)

        return document

    def _start_crawl(self, args: dict[str, Any]) -> Any:
        url = args["url"]
        depth = args["depth"]
        document = self._client.start_crawl(url, depth)

        if self._history is not None:
            try:
                self._history.log_crawl(url, depth, CRAWL_STARTED)
            except Exception:
                logger.warning("Crawl history not recorded for %s", url, exc_info=True)

        return document

    def close(self) -> None:
        """Release the client and history sink.

        Called by MCPServer.close() during shutdown.
        """
        self._client.close()
        if self._history is not None:
            self._history.close()
