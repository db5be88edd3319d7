#!/usr/bin/env python3
"""YaCy MCP Server - Main entry point.

Exposes a YaCy search engine peer to MCP clients over stdin/stdout.

================================================================================
DEVELOPER GUIDE: Adding a New YaCy Tool
================================================================================

1. ADD THE CLIENT CALL
   Add a method to YaCyClient in src/yacy_mcp/client.py that calls the YaCy
   servlet through self._request() and returns the decoded JSON document.

2. DECLARE THE TOOL
   Append a ToolDefinition to YACY_TOOLS in src/yacy_mcp/tools/registry.py.
   The position in the tuple is the position in tools/list. Give every
   property a "type"; string properties are validated strictly, integer
   properties fall back to their "default" when the client sends junk.

3. BIND THE HANDLER
   Map the tool name to the client call in
   ToolDispatcher._get_handler_registry() (src/yacy_mcp/tools/dispatcher.py).
   The dispatcher refuses to start if a registered tool has no handler.

EXAMPLE: Exposing the crawler queue
-----------------------------------

    # client.py
    def get_crawl_queue(self) -> Any:
        return self._request("GET", "/IndexCreateQueues_p.json")

    # registry.py
    ToolDefinition(
        name="yacy_get_crawl_queue",
        description="Get the YaCy crawler queue",
        input_schema=_schema(),
    ),

    # dispatcher.py
    "yacy_get_crawl_queue": lambda args: self._client.get_crawl_queue(),

CONFIGURATION
-------------
See config/yacy-mcp.yaml. YACY_API_URL / YACY_SERVER_URL, YACY_USERNAME and
YACY_PASSWORD override the file. DISABLE_MCP_STDIO=true turns the server off.

TESTING
-------
Tool handlers can be tested against a MagicMock client; see
tests/test_dispatcher.py. The HTTP layer is tested with httpx.MockTransport
in tests/test_client.py.

================================================================================
"""

from __future__ import annotations

import sys

from yacy_mcp.cli import main

if __name__ == "__main__":
    sys.exit(main())
