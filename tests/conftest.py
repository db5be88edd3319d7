"""Pytest configuration and shared fixtures."""

import sqlite3
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from yacy_mcp.client import YaCyClient
from yacy_mcp.history import HistoryStore
from yacy_mcp.server import MCPServer
from yacy_mcp.tools.dispatcher import ToolDispatcher
from yacy_mcp.tools.registry import ToolRegistry, create_yacy_registry

SEARCH_DOCUMENT = {
    "channels": [
        {
            "title": "YaCy P2P-Search for test",
            "totalResults": "2",
            "items": [
                {"title": "First", "link": "https://example.com/1"},
                {"title": "Second", "link": "https://example.com/2"},
            ],
        }
    ]
}


@pytest.fixture
def registry() -> ToolRegistry:
    """Registry with the full YaCy catalog."""
    return create_yacy_registry()


@pytest.fixture
def client() -> MagicMock:
    """YaCy client double returning canned documents."""
    mock = MagicMock(spec=YaCyClient)
    mock.search.return_value = SEARCH_DOCUMENT
    mock.get_status.return_value = {"status": "online"}
    mock.get_network_info.return_value = {"peers": {"active": 5}}
    mock.start_crawl.return_value = {"crawl": "started"}
    mock.get_index_info.return_value = {"rwi": 100}
    mock.get_peers.return_value = {"peers": []}
    mock.get_performance.return_value = {"queues": []}
    mock.get_host_browser.return_value = {"hosts": []}
    mock.get_document.return_value = {"title": "Doc"}
    return mock


@pytest.fixture
def history(tmp_path: Path) -> HistoryStore:
    """History store backed by a temporary database."""
    store = HistoryStore(tmp_path / "history.db")
    yield store
    store.close()


@pytest.fixture
def read_history():
    """Read history rows straight from a database file, newest first."""

    def read(db_path: Path, table: str) -> list[dict]:
        if not db_path.exists():
            return []
        conn = sqlite3.connect(db_path)
        conn.row_factory = sqlite3.Row
        try:
            return [dict(row) for row in conn.execute(f"SELECT * FROM {table} ORDER BY id DESC")]
        finally:
            conn.close()

    return read


@pytest.fixture
def dispatcher(registry: ToolRegistry, client: MagicMock, history: HistoryStore) -> ToolDispatcher:
    """Dispatcher wired to the client double and a temporary history store."""
    return ToolDispatcher(registry, client, history)


@pytest.fixture
def server(registry: ToolRegistry, dispatcher: ToolDispatcher) -> MCPServer:
    """Protocol engine over the YaCy catalog."""
    return MCPServer(registry, dispatcher)
