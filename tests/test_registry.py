"""Tests for the YaCy tool catalog."""

import pytest

from yacy_mcp.tools.base import ToolDefinition, ToolResult
from yacy_mcp.tools.registry import YACY_TOOLS, ToolRegistry, create_yacy_registry

EXPECTED_ORDER = [
    "yacy_search",
    "yacy_get_status",
    "yacy_get_network",
    "yacy_start_crawl",
    "yacy_get_index_info",
    "yacy_get_peers",
    "yacy_get_performance",
    "yacy_get_host_browser",
    "yacy_get_document",
]


class TestYaCyCatalog:
    """Tests for the static tool catalog."""

    def test_lists_nine_tools_in_order(self, registry):
        """Should list the nine YaCy tools in registration order."""
        assert registry.names() == EXPECTED_ORDER
        assert len(registry) == 9

    def test_every_tool_has_object_schema(self, registry):
        """Should give every tool an object schema with a required list."""
        for tool in registry.list():
            assert tool.description
            assert tool.input_schema["type"] == "object"
            assert isinstance(tool.input_schema["properties"], dict)
            assert isinstance(tool.input_schema["required"], list)

    def test_search_schema(self, registry):
        """Should require query and default count and offset."""
        tool = registry.resolve("yacy_search")

        assert tool.required == ["query"]
        assert tool.properties["query"]["type"] == "string"
        assert tool.properties["count"] == {
            "type": "integer",
            "description": "Maximum number of results to return",
            "default": 10,
        }
        assert tool.properties["offset"]["default"] == 0

    def test_start_crawl_schema(self, registry):
        """Should require url and default depth to zero."""
        tool = registry.resolve("yacy_start_crawl")

        assert tool.required == ["url"]
        assert tool.properties["depth"]["default"] == 0

    def test_host_browser_has_no_required_parameters(self, registry):
        """Should make every host browser parameter optional."""
        tool = registry.resolve("yacy_get_host_browser")

        assert tool.required == []
        assert tool.properties["host"]["default"] == ""
        assert tool.properties["count"]["default"] == 10

    def test_document_requires_url(self, registry):
        """Should require a document url."""
        assert registry.resolve("yacy_get_document").required == ["url"]

    @pytest.mark.parametrize(
        "name",
        ["yacy_get_status", "yacy_get_network", "yacy_get_index_info", "yacy_get_peers"],
    )
    def test_status_tools_take_no_parameters(self, registry, name):
        """Should declare no properties for parameterless tools."""
        tool = registry.resolve(name)

        assert tool.properties == {}
        assert tool.required == []

    def test_to_dict_uses_mcp_field_names(self, registry):
        """Should serialize with name, description and inputSchema."""
        data = registry.resolve("yacy_get_status").to_dict()

        assert data == {
            "name": "yacy_get_status",
            "description": "Get YaCy server status information",
            "inputSchema": {"type": "object", "properties": {}, "required": []},
        }

    def test_to_dict_returns_independent_schema(self, registry):
        """Should not let edits to a serialized schema reach the definition."""
        tool = registry.resolve("yacy_search")
        data = tool.to_dict()
        data["inputSchema"]["required"].append("extra")
        data["inputSchema"]["properties"].pop("query")

        assert tool.required == ["query"]
        assert "query" in tool.properties
        assert tool.to_dict()["inputSchema"]["required"] == ["query"]

    def test_create_registry_is_fresh_each_time(self):
        """Should build equivalent registries from the shared catalog."""
        assert create_yacy_registry().names() == create_yacy_registry().names()


class TestToolRegistry:
    """Tests for registry lookups and validation."""

    def test_resolve_unknown_returns_none(self, registry):
        """Should resolve an unknown name to None."""
        assert registry.resolve("bogus") is None
        assert "bogus" not in registry
        assert "yacy_search" in registry

    def test_rejects_duplicate_names(self):
        """Should reject two tools with the same name."""
        with pytest.raises(ValueError, match="Duplicate"):
            ToolRegistry([YACY_TOOLS[0], YACY_TOOLS[0]])

    def test_rejects_empty_description(self):
        """Should reject a tool without a description."""
        tool = ToolDefinition(name="empty", description="  ", input_schema={})

        with pytest.raises(ValueError, match="empty description"):
            ToolRegistry([tool])

    def test_list_returns_copy(self, registry):
        """Should not let callers mutate the catalog."""
        tools = registry.list()
        tools.clear()

        assert len(registry) == 9


class TestToolResult:
    """Tests for the tool result envelope."""

    def test_text_result(self):
        """Should wrap text in a single content item."""
        result = ToolResult.text("hello")

        assert result.to_dict() == {
            "content": [{"type": "text", "text": "hello"}],
            "isError": False,
        }

    def test_error_result(self):
        """Should flag error results."""
        result = ToolResult.error("boom")

        assert result.is_error
        assert result.content == [{"type": "text", "text": "boom"}]
