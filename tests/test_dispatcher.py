"""Tests for the tool dispatcher."""

import json
from unittest.mock import MagicMock

import pytest

from yacy_mcp.exceptions import YaCyAPIError, YaCyConnectionError, YaCyTimeoutError
from yacy_mcp.history import HistoryStore
from yacy_mcp.tools.base import ToolDefinition
from yacy_mcp.tools.dispatcher import ToolDispatcher, count_search_results
from yacy_mcp.tools.registry import YACY_TOOLS, ToolRegistry


def result_text(result):
    assert len(result.content) == 1
    assert result.content[0]["type"] == "text"
    return result.content[0]["text"]


class TestCountSearchResults:
    """Tests for counting items in a search document."""

    def test_counts_items_across_channels(self):
        """Should sum items over every channel."""
        document = {"channels": [{"items": [1, 2]}, {"items": [3]}]}

        assert count_search_results(document) == 3

    @pytest.mark.parametrize(
        "document",
        [None, [], "text", {}, {"channels": None}, {"channels": [{"items": "x"}, 5]}],
    )
    def test_unexpected_shapes_count_zero(self, document):
        """Should count zero for documents without item lists."""
        assert count_search_results(document) == 0


class TestDispatcherConstruction:
    """Tests for dispatcher wiring."""

    def test_rejects_tool_without_handler(self, client):
        """Should refuse a registry naming a tool it cannot run."""
        extra = ToolDefinition(name="yacy_unbound", description="Unbound", input_schema={})
        registry = ToolRegistry([*YACY_TOOLS, extra])

        with pytest.raises(ValueError, match="yacy_unbound"):
            ToolDispatcher(registry, client)

    def test_history_is_optional(self, registry, client):
        """Should run tools without a history sink."""
        dispatcher = ToolDispatcher(registry, client)

        result = dispatcher.execute("yacy_search", {"query": "linux"})

        assert not result.is_error


class TestToolExecution:
    """Tests for routing calls to the client."""

    def test_search_returns_serialized_document(self, dispatcher, client):
        """Should call search with bound arguments and return its JSON."""
        result = dispatcher.execute("yacy_search", {"query": "linux", "count": 5})

        assert not result.is_error
        assert json.loads(result_text(result)) == client.search.return_value
        client.search.assert_called_once_with("linux", 5, 0)

    @pytest.mark.parametrize(
        ("tool", "method", "expected"),
        [
            ("yacy_get_status", "get_status", {"status": "online"}),
            ("yacy_get_network", "get_network_info", {"peers": {"active": 5}}),
            ("yacy_get_index_info", "get_index_info", {"rwi": 100}),
            ("yacy_get_peers", "get_peers", {"peers": []}),
            ("yacy_get_performance", "get_performance", {"queues": []}),
        ],
    )
    def test_parameterless_tools(self, dispatcher, client, tool, method, expected):
        """Should route parameterless tools to their client call."""
        result = dispatcher.execute(tool, {})

        assert json.loads(result_text(result)) == expected
        getattr(client, method).assert_called_once_with()

    def test_start_crawl(self, dispatcher, client):
        """Should start a crawl with the requested depth."""
        result = dispatcher.execute("yacy_start_crawl", {"url": "https://example.com", "depth": 2})

        assert json.loads(result_text(result)) == {"crawl": "started"}
        client.start_crawl.assert_called_once_with("https://example.com", 2)

    def test_host_browser_defaults(self, dispatcher, client):
        """Should browse all hosts when no host is given."""
        dispatcher.execute("yacy_get_host_browser", {})

        client.get_host_browser.assert_called_once_with("", 10)

    def test_get_document(self, dispatcher, client):
        """Should fetch a document by url."""
        result = dispatcher.execute("yacy_get_document", {"url": "https://example.com/1"})

        assert json.loads(result_text(result)) == {"title": "Doc"}
        client.get_document.assert_called_once_with("https://example.com/1")

    def test_null_document_gives_empty_text(self, dispatcher, client):
        """Should return empty text when YaCy returns null."""
        client.get_status.return_value = None

        result = dispatcher.execute("yacy_get_status", {})

        assert not result.is_error
        assert result_text(result) == ""

    def test_preserves_non_ascii_text(self, dispatcher, client):
        """Should keep non-ASCII content intact through serialization."""
        client.get_document.return_value = {"title": "Grüße"}

        result = dispatcher.execute("yacy_get_document", {"url": "abc123"})

        assert json.loads(result_text(result)) == {"title": "Grüße"}


class TestToolErrors:
    """Tests for failures reported as tool results."""

    def test_unknown_tool(self, dispatcher):
        """Should report an unknown tool without raising."""
        result = dispatcher.execute("nonexistent_tool", {})

        assert result.is_error
        assert result_text(result) == "Unknown tool: nonexistent_tool"

    def test_missing_required_argument(self, dispatcher, client):
        """Should report a missing argument without calling YaCy."""
        result = dispatcher.execute("yacy_search", {})

        assert result.is_error
        assert "Missing required parameter: query" in result_text(result)
        client.search.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [
            YaCyConnectionError("Cannot reach YaCy at http://localhost:8090: refused"),
            YaCyTimeoutError("Request to YaCy timed out: /Status.json"),
            YaCyAPIError("YaCy returned HTTP 500 for /Status.json", status_code=500),
        ],
    )
    def test_client_failure_becomes_error_result(self, dispatcher, client, error):
        """Should turn YaCy failures into tool errors."""
        client.get_status.side_effect = error

        result = dispatcher.execute("yacy_get_status", {})

        assert result.is_error
        assert result_text(result) == f"Error executing tool yacy_get_status: {error}"

    def test_unexpected_failure_becomes_error_result(self, dispatcher, client):
        """Should contain unexpected exceptions."""
        client.get_peers.side_effect = RuntimeError("boom")

        result = dispatcher.execute("yacy_get_peers", {})

        assert result.is_error
        assert result_text(result) == "Error executing tool yacy_get_peers: boom"

    def test_unserializable_document_becomes_error_result(self, dispatcher, client):
        """Should report a document that cannot be serialized."""
        client.get_status.return_value = {"when": object()}

        result = dispatcher.execute("yacy_get_status", {})

        assert result.is_error


class TestHistoryRecording:
    """Tests for search and crawl history side effects."""

    def test_search_is_recorded(self, dispatcher, history, read_history):
        """Should record the query and result count."""
        dispatcher.execute("yacy_search", {"query": "linux"})

        rows = read_history(history.db_path, "search_history")
        assert len(rows) == 1
        assert rows[0]["query"] == "linux"
        assert rows[0]["result_count"] == 2
        assert rows[0]["execution_time_ms"] >= 0

    def test_crawl_is_recorded(self, dispatcher, history, read_history):
        """Should record the crawl url, depth and status."""
        dispatcher.execute("yacy_start_crawl", {"url": "https://example.com", "depth": 1})

        rows = read_history(history.db_path, "crawl_history")
        assert len(rows) == 1
        assert rows[0]["url"] == "https://example.com"
        assert rows[0]["depth"] == 1
        assert rows[0]["status"] == "started"

    def test_failed_search_is_not_recorded(self, dispatcher, client, history, read_history):
        """Should not record a search that YaCy rejected."""
        client.search.side_effect = YaCyConnectionError("down")

        dispatcher.execute("yacy_search", {"query": "linux"})

        assert read_history(history.db_path, "search_history") == []

    def test_failing_history_does_not_fail_search(self, registry, client):
        """Should return search results even when history cannot be written."""
        broken = MagicMock(spec=HistoryStore)
        broken.log_search.side_effect = RuntimeError("disk full")
        dispatcher = ToolDispatcher(registry, client, broken)

        result = dispatcher.execute("yacy_search", {"query": "linux"})

        assert not result.is_error
        assert json.loads(result_text(result)) == client.search.return_value

    def test_failing_history_does_not_fail_crawl(self, registry, client):
        """Should return crawl results even when history cannot be written."""
        broken = MagicMock(spec=HistoryStore)
        broken.log_crawl.side_effect = RuntimeError("disk full")
        dispatcher = ToolDispatcher(registry, client, broken)

        result = dispatcher.execute("yacy_start_crawl", {"url": "https://example.com"})

        assert not result.is_error


class TestDispatcherClose:
    """Tests for releasing collaborators."""

    def test_close_releases_client_and_history(self, registry, client):
        """Should close both the client and the history sink."""
        history = MagicMock(spec=HistoryStore)
        dispatcher = ToolDispatcher(registry, client, history)

        dispatcher.close()

        client.close.assert_called_once_with()
        history.close.assert_called_once_with()
