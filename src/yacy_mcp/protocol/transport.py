"""Line-oriented stdio transport.

One JSON-RPC message per line in each direction. stdout carries protocol
traffic only; everything diagnostic goes to stderr.
"""

from __future__ import annotations

import io
import sys
import threading
from typing import TextIO

LOG_PREFIX = "[MCP]"


class StdioTransport:
    """Reads request lines from stdin and writes response lines to stdout.

    Writes are serialized so two response lines can never interleave.
    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            stdin: Input stream (defaults to sys.stdin).
            stdout: Output stream (defaults to sys.stdout).
            stderr: Log stream (defaults to sys.stderr).
        """
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._stderr = stderr or sys.stderr
        self._write_lock = threading.Lock()

    @classmethod
    def from_process(cls) -> StdioTransport:
        """Build a transport over the process streams, forcing UTF-8.

        Undecodable input bytes become U+FFFD instead of ending the session.
        """
        for stream in (sys.stdin, sys.stdout):
            if isinstance(stream, io.TextIOWrapper):
                stream.reconfigure(encoding="utf-8", errors="replace")
        return cls(sys.stdin, sys.stdout, sys.stderr)

    def read_message(self) -> str | None:
        """Return the next non-blank line without surrounding whitespace.

        Returns:
            The line, or None once input is exhausted or unreadable.
        """
        while True:
            try:
                line = self._stdin.readline()
            except (OSError, ValueError) as e:
                self.log(f"Error reading from stdin: {e}")
                return None

            if not line:
                return None

            line = line.strip()
            if line:
                return line

    def write_message(self, message: str) -> None:
        """Write one message line to stdout and flush it.

        Args:
            message: Serialized JSON-RPC message.

        Raises:
            ValueError: If the message contains a line break.
        """
        if "\n" in message or "\r" in message:
            raise ValueError("Protocol messages must fit on a single line")

        with self._write_lock:
            self._stdout.write(message)
            self._stdout.write("\n")
            self._stdout.flush()

    def log(self, message: str) -> None:
        """Write a diagnostic line to stderr.

        Args:
            message: Text to log.
        """
        self._stderr.write(f"{LOG_PREFIX} {message}\n")
        self._stderr.flush()
