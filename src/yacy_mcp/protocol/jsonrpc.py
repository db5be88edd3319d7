"""JSON-RPC 2.0 message parsing and formatting.

Implements the subset of JSON-RPC 2.0 used by the MCP stdio transport:
single requests and notifications, no batches.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any

# JSON-RPC 2.0 error codes used by this server. Malformed JSON is reported
# as INVALID_REQUEST as well.
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603

# Maximum message size (1 MB)
MAX_MESSAGE_SIZE = 1_048_576

RequestId = int | float | str


class JsonRpcError(Exception):
    """JSON-RPC error with code and message."""

    def __init__(self, code: int, message: str, msg_id: RequestId | None = None) -> None:
        """Initialize the error.

        Args:
            code: JSON-RPC error code.
            message: Human-readable error message.
            msg_id: Id of the offending request, if it could be read.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.msg_id = msg_id


@dataclass
class JsonRpcRequest:
    """Represents a JSON-RPC request (has id)."""

    id: RequestId
    method: str
    params: dict[str, Any] | None = None


@dataclass
class JsonRpcNotification:
    """Represents a JSON-RPC notification (id absent or null)."""

    method: str
    params: dict[str, Any] | None = None


def is_valid_id(value: Any) -> bool:
    """Check whether a value can serve as a request id.

    Strings and finite numbers qualify; booleans do not.
    """
    if isinstance(value, float):
        return math.isfinite(value)
    return isinstance(value, int | str) and not isinstance(value, bool)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard constant {name}")


def parse_message(raw: str) -> JsonRpcRequest | JsonRpcNotification:
    """Parse a JSON-RPC message from a string.

    Args:
        raw: Raw JSON string.

    Returns:
        Parsed request or notification.

    Raises:
        JsonRpcError: If the message is invalid.
    """
    size = len(raw.encode("utf-8", errors="surrogatepass"))
    if size > MAX_MESSAGE_SIZE:
        raise JsonRpcError(
            INVALID_REQUEST, f"Message too large: {size} bytes exceeds {MAX_MESSAGE_SIZE} limit"
        )

    try:
        data = json.loads(raw, parse_constant=_reject_constant)
    except ValueError as e:
        raise JsonRpcError(INVALID_REQUEST, f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: message must be an object")

    raw_id = data.get("id")
    msg_id = raw_id if is_valid_id(raw_id) else None

    if data.get("jsonrpc") != "2.0":
        raise JsonRpcError(INVALID_REQUEST, "Invalid JSON-RPC version", msg_id)

    method = data.get("method")
    if not isinstance(method, str):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: method must be a string", msg_id)

    params = data.get("params")
    if params is not None and not isinstance(params, dict):
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: params must be an object", msg_id)

    if raw_id is None:
        return JsonRpcNotification(method=method, params=params)

    if msg_id is None:
        raise JsonRpcError(INVALID_REQUEST, "Invalid Request: id must be a string or number")

    return JsonRpcRequest(id=msg_id, method=method, params=params)


def _dumps(payload: dict[str, Any]) -> str:
    return json.dumps(payload, separators=(",", ":"), allow_nan=False)


def format_response(msg_id: RequestId | None, result: Any) -> str:
    """Format a successful JSON-RPC response.

    Args:
        msg_id: Request ID to echo back.
        result: Result payload.

    Returns:
        JSON string (single line).
    """
    response = {
        "jsonrpc": "2.0",
        "id": msg_id,
        "result": result,
    }
    return _dumps(response)


def format_error(msg_id: RequestId | None, code: int, message: str) -> str:
    """Format a JSON-RPC error response.

    Args:
        msg_id: Request ID (or None when it could not be determined).
        code: Error code.
        message: Error message.

    Returns:
        JSON string (single line).
    """
    response = {
        "jsonrpc": "2.0",
        "id": msg_id,
        "error": {
            "code": code,
            "message": message,
        },
    }
    return _dumps(response)
