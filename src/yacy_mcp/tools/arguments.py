"""Tool argument validation and coercion.

Arguments arrive as decoded JSON. String properties are checked strictly;
integer properties are coerced leniently and fall back to the schema default
when the value cannot be used.
"""

from __future__ import annotations

from typing import Any

from yacy_mcp.tools.base import ToolDefinition


class ToolArgumentError(ValueError):
    """Raised when a tool argument is missing or has the wrong kind."""

    def __init__(self, parameter: str, message: str) -> None:
        super().__init__(message)
        self.parameter = parameter


def coerce_int(value: Any) -> int | None:
    """Coerce a JSON value to an integer.

    Accepts native integers, integral floats and strings holding an integer.
    Booleans are not numbers here.

    Args:
        value: Raw argument value.

    Returns:
        The integer, or None if the value cannot be used.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _bind_string(name: str, spec: dict[str, Any], value: Any, required: bool) -> str | None:
    if value is None:
        if required:
            raise ToolArgumentError(name, f"Missing required parameter: {name}")
        return spec.get("default")

    if not isinstance(value, str):
        raise ToolArgumentError(name, f"Invalid parameter '{name}': expected string")

    if required and not value.strip():
        raise ToolArgumentError(name, f"Missing required parameter: {name}")

    return value


def _bind_integer(name: str, spec: dict[str, Any], value: Any, required: bool) -> int | None:
    coerced = coerce_int(value)
    if coerced is not None:
        return coerced

    default = spec.get("default")
    if default is None and required:
        raise ToolArgumentError(name, f"Missing required parameter: {name}")
    return default


def bind_arguments(tool: ToolDefinition, arguments: dict[str, Any]) -> dict[str, Any]:
    """Validate and coerce arguments against a tool's input schema.

    Every schema property is present in the result, defaulted when absent.
    Arguments not named by the schema are dropped.

    Args:
        tool: Tool whose schema applies.
        arguments: Raw arguments from the tools/call request.

    Returns:
        Bound arguments keyed by property name.

    Raises:
        ToolArgumentError: If a required parameter is missing or a string
            parameter has a non-string value.
    """
    required = set(tool.required)
    bound: dict[str, Any] = {}

    for name, spec in tool.properties.items():
        value = arguments.get(name)
        kind = spec.get("type")

        if kind == "string":
            bound[name] = _bind_string(name, spec, value, name in required)
        elif kind == "integer":
            bound[name] = _bind_integer(name, spec, value, name in required)
        else:
            if value is None and name in required:
                raise ToolArgumentError(name, f"Missing required parameter: {name}")
            bound[name] = spec.get("default") if value is None else value

    return bound
