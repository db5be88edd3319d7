"""HTTP client for the YaCy search engine API.

Wraps a pooled httpx client and maps transport, status and decoding failures
onto the YaCyError hierarchy so callers only handle one family of errors.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from yacy_mcp.config import YaCyConfig
from yacy_mcp.exceptions import YaCyAPIError, YaCyConnectionError, YaCyTimeoutError

logger = logging.getLogger(__name__)

USER_AGENT = "yacy-mcp/1.0 (YaCy MCP Server)"

# YaCy servlet endpoints
SEARCH_PATH = "/yacysearch.json"
STATUS_PATH = "/Status.json"
NETWORK_PATH = "/Network.json"
CRAWL_START_PATH = "/CrawlStartExpert.json"
INDEX_PATH = "/IndexControlRWIs_p.json"
PEERS_PATH = "/Peers_p.json"
PERFORMANCE_PATH = "/PerformanceQueues_p.json"
HOST_BROWSER_PATH = "/HostBrowser.json"
DOCUMENT_PATH = "/yacydoc.json"


class YaCyClient:
    """Client for a single YaCy peer.

    Every public method returns the decoded JSON document from YaCy.
    """

    def __init__(
        self,
        config: YaCyConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client with a reusable HTTP connection pool.

        Args:
            config: Connection settings.
            transport: Optional httpx transport (used to stub YaCy in tests).
        """
        self._config = config
        auth = (config.username, config.password) if config.username else None
        self._client = httpx.Client(
            base_url=config.server_url,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            auth=auth,
            follow_redirects=True,
            timeout=httpx.Timeout(config.read_timeout, connect=config.connect_timeout),
            transport=transport,
        )

    @property
    def server_url(self) -> str:
        """Return the YaCy base URL."""
        return self._config.server_url

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> YaCyClient:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()

    def search(self, query: str, count: int = 10, offset: int = 0) -> Any:
        """Run a search query against the YaCy index.

        Args:
            query: Search terms.
            count: Maximum number of records to return.
            offset: Index of the first record.

        Returns:
            Decoded yacysearch.json document.
        """
        params = {"query": query, "maximumRecords": count, "startRecord": offset}
        return self._request("GET", SEARCH_PATH, params=params)

    def get_status(self) -> Any:
        """Get peer status information."""
        return self._request("GET", STATUS_PATH)

    def get_network_info(self) -> Any:
        """Get network information."""
        return self._request("GET", NETWORK_PATH)

    def start_crawl(self, url: str, depth: int = 0) -> Any:
        """Start a new crawl.

        Args:
            url: Start URL of the crawl.
            depth: Link depth to follow.

        Returns:
            Decoded crawl start response.
        """
        data = {"crawlingURL": url, "crawlingDepth": depth, "crawlingMode": "url"}
        return self._request("POST", CRAWL_START_PATH, data=data)

    def get_index_info(self) -> Any:
        """Get index information."""
        return self._request("GET", INDEX_PATH)

    def get_peers(self) -> Any:
        """Get information about known peers."""
        return self._request("GET", PEERS_PATH)

    def get_performance(self) -> Any:
        """Get performance queue statistics."""
        return self._request("GET", PERFORMANCE_PATH)

    def get_host_browser(self, path: str = "", count: int = 10) -> Any:
        """Browse hosts or paths in the index.

        Args:
            path: Host or path to browse; empty lists hosts.
            count: Maximum number of entries.

        Returns:
            Decoded HostBrowser.json document.
        """
        params = {"path": path or "", "facetcount": count}
        return self._request("GET", HOST_BROWSER_PATH, params=params)

    def get_document(self, identifier: str) -> Any:
        """Get details of an indexed document.

        Args:
            identifier: Document URL, or YaCy URL hash.

        Returns:
            Decoded yacydoc.json document.
        """
        if "://" in identifier:
            params = {"urlstring": identifier}
        else:
            params = {"urlhash": identifier}
        return self._request("GET", DOCUMENT_PATH, params=params)

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> Any:
        """Perform a request and decode the JSON body.

        Args:
            method: HTTP method.
            path: Servlet path relative to the server URL.
            params: Query parameters.
            data: Form body (for POST).

        Returns:
            Decoded JSON document.

        Raises:
            YaCyTimeoutError: If the request timed out.
            YaCyConnectionError: If the server could not be reached.
            YaCyAPIError: If YaCy returned an error status or a non-JSON body.
        """
        try:
            response = self._client.request(method, path, params=params, data=data)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise YaCyTimeoutError(f"Request to YaCy timed out: {path}") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise YaCyAPIError(f"YaCy returned HTTP {status} for {path}", status_code=status) from e
        except httpx.RequestError as e:
            raise YaCyConnectionError(
                f"Cannot reach YaCy at {self._config.server_url}: {e}"
            ) from e

        logger.debug("YaCy %s %s -> %d", method, path, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise YaCyAPIError(
                f"Malformed response from YaCy for {path}",
                status_code=response.status_code,
            ) from e
