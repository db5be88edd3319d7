"""MCP lifecycle management.

Answers the initialize handshake and tracks connection state. The state is
informational: other methods are served whether or not the client has
initialized.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

# Protocol version advertised in every initialize response
MCP_PROTOCOL_VERSION = "2024-11-05"


class LifecycleState(Enum):
    """MCP connection lifecycle states."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


@dataclass
class LifecycleManager:
    """Tracks the MCP initialization handshake."""

    server_info: dict[str, str] = field(
        default_factory=lambda: {"name": "yacy-mcp", "version": "1.0.0"}
    )
    capabilities: dict[str, Any] = field(default_factory=lambda: {"tools": {}})
    state: LifecycleState = LifecycleState.UNINITIALIZED
    client_info: dict[str, Any] | None = None
    client_protocol_version: str | None = None

    @property
    def is_ready(self) -> bool:
        """Check if the client completed the handshake."""
        return self.state == LifecycleState.READY

    def handle_initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        """Handle initialize request.

        May be repeated; each call restarts the handshake.

        Args:
            params: Initialize request parameters.

        Returns:
            Initialize response result.
        """
        client_info = params.get("clientInfo")
        self.client_info = client_info if isinstance(client_info, dict) else None
        requested = params.get("protocolVersion")
        self.client_protocol_version = requested if isinstance(requested, str) else None

        if self.client_protocol_version and self.client_protocol_version != MCP_PROTOCOL_VERSION:
            logger.info(
                "Client requested protocol %s, answering with %s",
                self.client_protocol_version,
                MCP_PROTOCOL_VERSION,
            )

        self.state = LifecycleState.INITIALIZING
        logger.info("MCP client initializing: %s", self.client_info or "unknown client")

        return {
            "protocolVersion": MCP_PROTOCOL_VERSION,
            "capabilities": self.capabilities,
            "serverInfo": self.server_info,
        }

    def handle_initialized(self) -> None:
        """Handle initialized notification."""
        if self.state != LifecycleState.INITIALIZING:
            logger.debug("initialized notification received in state %s", self.state.value)
        self.state = LifecycleState.READY
        logger.info("MCP client ready")
