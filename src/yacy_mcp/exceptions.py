"""Custom exceptions for yacy-mcp.

Collaborator failures derive from YaCyError so the tool dispatcher can turn
them into tool-level error results. Protocol failures are modelled separately
by JsonRpcError in the protocol package.
"""

from __future__ import annotations


class YaCyMcpError(Exception):
    """Base exception for yacy-mcp."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(YaCyMcpError):
    """Raised when configuration is invalid or cannot be read."""

    pass


class YaCyError(YaCyMcpError):
    """Raised when a call to the YaCy HTTP API fails."""

    pass


class YaCyConnectionError(YaCyError):
    """Raised when the YaCy server cannot be reached."""

    pass


class YaCyTimeoutError(YaCyError):
    """Raised when the YaCy server does not answer in time."""

    pass


class YaCyAPIError(YaCyError):
    """Raised when YaCy answers with an error status or a malformed body."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code
