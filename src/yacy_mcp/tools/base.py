"""Tool data structures.

Defines the immutable tool definition exposed through tools/list and the
result envelope returned by tools/call.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ToolDefinition:
    """Definition of a tool exposed to MCP clients."""

    name: str
    description: str
    input_schema: dict[str, Any] = field(hash=False)

    @property
    def properties(self) -> dict[str, Any]:
        """Return the schema's property mapping."""
        return self.input_schema.get("properties", {})

    @property
    def required(self) -> list[str]:
        """Return the names of required properties, in schema order."""
        return list(self.input_schema.get("required", []))

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP tool format.

        Returns:
            Dictionary in MCP tools/list format. The schema is a deep copy.
        """
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(self.input_schema),
        }


@dataclass
class ToolResult:
    """Result of a tool execution.

    Content always holds at least one text item. Failed calls carry the
    failure message as text and set is_error.
    """

    content: list[dict[str, Any]]
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> ToolResult:
        """Build a successful single-text result."""
        return cls(content=[{"type": "text", "text": text}], is_error=False)

    @classmethod
    def error(cls, message: str) -> ToolResult:
        """Build a failed single-text result."""
        return cls(content=[{"type": "text", "text": message}], is_error=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP result format.

        Returns:
            Dictionary in MCP tools/call result format.
        """
        return {
            "content": self.content,
            "isError": self.is_error,
        }
