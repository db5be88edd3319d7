"""Stdio server runner.

Owns the transport and the read loop. A daemon reader thread feeds lines
into a queue; a single worker thread handles them strictly in arrival order
so responses leave in the same order requests came in.
"""

from __future__ import annotations

import logging
import queue
import threading
from enum import Enum
from typing import Any

from yacy_mcp.protocol.transport import StdioTransport
from yacy_mcp.server import MCPServer

logger = logging.getLogger(__name__)

# Seconds the worker waits for a line before re-checking the stop flag
POLL_INTERVAL = 0.1


class ServerState(Enum):
    """Runner states. STOPPED is terminal."""

    NEW = "new"
    RUNNING = "running"
    STOPPED = "stopped"


class StdioServer:
    """Runs an MCPServer over a stdio transport.

    Example:
        with StdioServer(server) as runner:
            runner.wait()
    """

    def __init__(
        self,
        server: MCPServer,
        transport: StdioTransport | None = None,
        grace_period: float = 5.0,
    ) -> None:
        """Initialize the runner.

        Args:
            server: Protocol engine handling each message.
            transport: Line transport (defaults to process stdio).
            grace_period: Seconds stop() waits for the current message.
        """
        self._server = server
        self._transport = transport or StdioTransport()
        self._grace_period = grace_period
        self._state = ServerState.NEW
        self._state_lock = threading.Lock()
        self._stop = threading.Event()
        self._done = threading.Event()
        self._lines: queue.Queue[str | None] = queue.Queue()
        self._reader: threading.Thread | None = None
        self._worker: threading.Thread | None = None

    @property
    def state(self) -> ServerState:
        """Return the current runner state."""
        return self._state

    @property
    def transport(self) -> StdioTransport:
        """Return the transport."""
        return self._transport

    def start(self) -> None:
        """Start reading and handling messages.

        Calling start() on a running server does nothing.

        Raises:
            RuntimeError: If the server was already stopped.
        """
        with self._state_lock:
            if self._state == ServerState.RUNNING:
                return
            if self._state == ServerState.STOPPED:
                raise RuntimeError("Server was stopped and cannot be restarted")
            self._state = ServerState.RUNNING

        self._reader = threading.Thread(
            target=self._read_loop, name="mcp-stdio-reader", daemon=True
        )
        self._worker = threading.Thread(target=self._run, name="mcp-stdio-worker", daemon=True)
        self._reader.start()
        self._worker.start()
        self._transport.log("MCP stdio server listening for JSON-RPC messages")

    def stop(self) -> None:
        """Stop the server.

        Lets the message being handled finish, then ends the loop. A read
        blocked on stdin is abandoned rather than awaited. Safe to call
        more than once.
        """
        with self._state_lock:
            if self._state == ServerState.STOPPED:
                return
            was_running = self._state == ServerState.RUNNING
            self._state = ServerState.STOPPED

        self._stop.set()
        if not was_running:
            self._done.set()
            return

        self._transport.log("Stopping MCP stdio server")
        if self._worker is not None and self._worker is not threading.current_thread():
            self._worker.join(self._grace_period)
            if self._worker.is_alive():
                logger.warning(
                    "Worker still busy after %.1fs grace period", self._grace_period
                )
        self._transport.log("MCP stdio server stopped")

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the read loop has ended.

        Args:
            timeout: Maximum seconds to wait, or None to wait forever.

        Returns:
            True if the loop ended, False on timeout.
        """
        return self._done.wait(timeout)

    def _read_loop(self) -> None:
        """Move lines from the transport into the queue until EOF."""
        while not self._stop.is_set():
            line = self._transport.read_message()
            self._lines.put(line)
            if line is None:
                return

    def _run(self) -> None:
        """Handle queued lines one at a time until EOF or stop()."""
        try:
            while not self._stop.is_set():
                try:
                    line = self._lines.get(timeout=POLL_INTERVAL)
                except queue.Empty:
                    continue

                if line is None:
                    self._transport.log("EOF received, shutting down")
                    break

                response = self._server.handle_message(line)
                if response is not None:
                    self._transport.write_message(response)
        except Exception:
            logger.exception("MCP stdio worker crashed")
        finally:
            with self._state_lock:
                self._state = ServerState.STOPPED
            self._done.set()

    def __enter__(self) -> StdioServer:
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.stop()
