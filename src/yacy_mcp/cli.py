"""Command-line entry point for the YaCy MCP server."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from yacy_mcp import __version__
from yacy_mcp.client import YaCyClient
from yacy_mcp.config import DEFAULT_CONFIG_PATH, AppConfig, is_stdio_enabled, load_config
from yacy_mcp.exceptions import ConfigurationError
from yacy_mcp.history import HistoryStore
from yacy_mcp.protocol.transport import StdioTransport
from yacy_mcp.runner import StdioServer
from yacy_mcp.server import MCPServer
from yacy_mcp.tools.dispatcher import ToolDispatcher
from yacy_mcp.tools.registry import create_yacy_registry

LOG_FORMAT = "[MCP] %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    """Send all log records to stderr.

    Args:
        level: Logging level name (DEBUG, INFO, ...).
    """
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        force=True,
    )


def create_server(config: AppConfig, history_enabled: bool = True) -> MCPServer:
    """Wire the YaCy client, history store, registry and dispatcher.

    Args:
        config: Loaded configuration.
        history_enabled: Set False to skip history recording regardless of
            configuration.

    Returns:
        Ready-to-use MCPServer.
    """
    client = YaCyClient(config.yacy)
    history = None
    if history_enabled and config.history.enabled:
        history = HistoryStore(config.history.database)

    registry = create_yacy_registry()
    dispatcher = ToolDispatcher(registry, client, history)
    return MCPServer(
        registry,
        dispatcher,
        server_name=config.server.name,
        server_version=config.server.version,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the MCP server.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="yacy-mcp",
        description="MCP server exposing a YaCy search engine over stdio",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help=f"Path to configuration YAML file (default: {DEFAULT_CONFIG_PATH} if present)",
    )
    parser.add_argument(
        "--log-level",
        "-l",
        default=None,
        help="Log level for stderr output (default: from config, INFO)",
    )
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Do not record searches and crawls in the history database",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"yacy-mcp {__version__}",
    )

    args = parser.parse_args(argv)

    if args.config is not None and not args.config.exists():
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        return 1

    config_path = args.config
    if config_path is None and DEFAULT_CONFIG_PATH.exists():
        config_path = DEFAULT_CONFIG_PATH

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    configure_logging(args.log_level or config.server.log_level)

    if not is_stdio_enabled():
        StdioTransport().log("MCP stdio disabled by environment, exiting")
        return 0

    transport = StdioTransport.from_process()
    with create_server(config, history_enabled=not args.no_history) as server:
        runner = StdioServer(server, transport, grace_period=config.server.stop_grace_period)
        transport.log(f"YaCy MCP server started (YaCy at {config.yacy.server_url})")
        if config_path is not None:
            transport.log(f"Configuration loaded from: {config_path}")

        runner.start()
        try:
            runner.wait()
        except KeyboardInterrupt:
            transport.log("Interrupted, shutting down")
            runner.stop()
            return 130  # Standard exit code for SIGINT

    return 0
