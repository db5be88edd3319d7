"""Configuration management for yacy-mcp.

Settings come from an optional YAML file and are then overridden by
environment variables. String values may reference the environment with
${VAR} syntax.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from yacy_mcp.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "http://localhost:8090"
DEFAULT_CONFIG_PATH = Path("config/yacy-mcp.yaml")

# Server URL precedence: YACY_API_URL > YACY_SERVER_URL > file > default
ENV_YACY_API_URL = "YACY_API_URL"
ENV_YACY_SERVER_URL = "YACY_SERVER_URL"
ENV_YACY_USERNAME = "YACY_USERNAME"
ENV_YACY_PASSWORD = "YACY_PASSWORD"

ENV_DISABLE_MCP_STDIO = "DISABLE_MCP_STDIO"
ENV_MCP_MODE = "MCP_MODE"
ENV_MCP_TRANSPORT = "MCP_TRANSPORT"

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


def default_database_path() -> Path:
    """Return the default history database location (~/.yacy-mcp/yacy_mcp.db)."""
    return Path(os.path.expanduser("~")) / ".yacy-mcp" / "yacy_mcp.db"


def expand_env_vars(value: str, environ: Mapping[str, str] | None = None) -> str:
    """Expand environment variables in a string.

    Supports ${VAR_NAME} syntax. Unknown variables are left unchanged.

    Args:
        value: String potentially containing environment variable references.
        environ: Environment to read from (defaults to os.environ).

    Returns:
        String with known environment variables expanded.
    """
    env = os.environ if environ is None else environ

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = env.get(var_name)
        if env_value is not None:
            return env_value
        if var_name == "HOME":
            return os.path.expanduser("~")
        return match.group(0)

    return _ENV_PATTERN.sub(replacer, value)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class YaCyConfig:
    """Connection settings for the YaCy peer."""

    server_url: str = DEFAULT_SERVER_URL
    username: str = "admin"
    password: str = ""
    connect_timeout: float = 30.0
    read_timeout: float = 30.0

    def validate(self) -> None:
        """Validate connection settings.

        Raises:
            ConfigurationError: If a value is unusable.
        """
        if not self.server_url:
            raise ConfigurationError("YaCy server URL must not be empty")
        if self.connect_timeout <= 0 or self.read_timeout <= 0:
            raise ConfigurationError("YaCy timeouts must be positive")
        if not self.server_url.startswith(("http://", "https://")):
            logger.warning(
                "YaCy server URL does not start with http:// or https://: %s",
                self.server_url,
            )


@dataclass
class HistoryConfig:
    """Search/crawl history settings."""

    enabled: bool = True
    database: Path = field(default_factory=default_database_path)


@dataclass
class ServerConfig:
    """MCP server identity and runtime settings."""

    name: str = "yacy-mcp"
    version: str = "1.0.0"
    log_level: str = "INFO"
    stop_grace_period: float = 5.0


@dataclass
class AppConfig:
    """Main configuration for yacy-mcp."""

    yacy: YaCyConfig = field(default_factory=YaCyConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_dict(
        cls,
        raw_config: Mapping[str, Any],
        environ: Mapping[str, str] | None = None,
    ) -> AppConfig:
        """Create a configuration from a parsed YAML mapping.

        Args:
            raw_config: Dictionary parsed from YAML.
            environ: Environment used for ${VAR} expansion.

        Returns:
            AppConfig with defaults for anything not given.

        Raises:
            ConfigurationError: If a section is not a mapping or a value has
                the wrong type.
        """
        yacy_section = cls._section(raw_config, "yacy")
        history_section = cls._section(raw_config, "history")
        server_section = cls._section(raw_config, "server")

        def text(section: Mapping[str, Any], key: str, default: str) -> str:
            value = section.get(key, default)
            return expand_env_vars(str(value), environ) if value is not None else default

        try:
            yacy = YaCyConfig(
                server_url=text(yacy_section, "server_url", DEFAULT_SERVER_URL),
                username=text(yacy_section, "username", "admin"),
                password=text(yacy_section, "password", ""),
                connect_timeout=float(yacy_section.get("connect_timeout", 30.0)),
                read_timeout=float(yacy_section.get("read_timeout", 30.0)),
            )

            database = history_section.get("database")
            history = HistoryConfig(
                enabled=_parse_bool(history_section.get("enabled", True)),
                database=(
                    Path(expand_env_vars(str(database), environ)).expanduser()
                    if database
                    else default_database_path()
                ),
            )

            server = ServerConfig(
                name=text(server_section, "name", "yacy-mcp"),
                version=text(server_section, "version", "1.0.0"),
                log_level=text(server_section, "log_level", "INFO").upper(),
                stop_grace_period=float(server_section.get("stop_grace_period", 5.0)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration value: {e}") from e

        return cls(yacy=yacy, history=history, server=server)

    @classmethod
    def load_from_file(
        cls,
        config_path: Path,
        environ: Mapping[str, str] | None = None,
    ) -> AppConfig:
        """Load configuration from a YAML file.

        A missing file yields the defaults.

        Args:
            config_path: Path to the YAML file.
            environ: Environment used for ${VAR} expansion.

        Returns:
            AppConfig instance.

        Raises:
            ConfigurationError: If the file cannot be parsed or is not a mapping.
        """
        if not config_path.exists():
            return cls()

        try:
            with open(config_path, encoding="utf-8") as f:
                raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse configuration YAML: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {config_path}: {e}") from e

        if not isinstance(raw_config, dict):
            raise ConfigurationError("Configuration must be a YAML mapping")

        return cls.from_dict(raw_config, environ)

    def apply_environment(self, environ: Mapping[str, str] | None = None) -> None:
        """Override settings from environment variables.

        Args:
            environ: Environment to read (defaults to os.environ).
        """
        env = os.environ if environ is None else environ

        api_url = env.get(ENV_YACY_API_URL)
        server_url = env.get(ENV_YACY_SERVER_URL)
        if api_url:
            self.yacy.server_url = api_url
            logger.info("Using YaCy server URL from %s: %s", ENV_YACY_API_URL, api_url)
        elif server_url:
            self.yacy.server_url = server_url
            logger.info("Using YaCy server URL from %s: %s", ENV_YACY_SERVER_URL, server_url)

        if env.get(ENV_YACY_USERNAME):
            self.yacy.username = env[ENV_YACY_USERNAME]
        if env.get(ENV_YACY_PASSWORD) is not None:
            self.yacy.password = env[ENV_YACY_PASSWORD]

        self.yacy.server_url = self.yacy.server_url.rstrip("/")

    @staticmethod
    def _section(raw_config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
        section = raw_config.get(name) or {}
        if not isinstance(section, Mapping):
            raise ConfigurationError(f"Configuration section '{name}' must be a mapping")
        return section


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load configuration from file and environment.

    Args:
        path: YAML file to read; None uses only defaults and environment.
        environ: Environment to read (defaults to os.environ).

    Returns:
        Validated AppConfig.

    Raises:
        ConfigurationError: If the file or a value is invalid.
    """
    config = AppConfig.load_from_file(path, environ) if path is not None else AppConfig()
    config.apply_environment(environ)
    config.yacy.validate()
    return config


def is_stdio_enabled(environ: Mapping[str, str] | None = None) -> bool:
    """Decide whether the stdio MCP server should run.

    DISABLE_MCP_STDIO=true wins. MCP_MODE=true or MCP_TRANSPORT=stdio enable
    it explicitly. With no signal at all stdio is enabled.

    Args:
        environ: Environment to read (defaults to os.environ).

    Returns:
        True if the stdio server should run.
    """
    env = os.environ if environ is None else environ

    if _parse_bool(env.get(ENV_DISABLE_MCP_STDIO, "false")):
        logger.debug("MCP stdio disabled via %s", ENV_DISABLE_MCP_STDIO)
        return False

    if _parse_bool(env.get(ENV_MCP_MODE, "false")):
        logger.debug("MCP stdio enabled via %s", ENV_MCP_MODE)
        return True

    if env.get(ENV_MCP_TRANSPORT, "").lower() == "stdio":
        logger.debug("MCP stdio enabled via %s=stdio", ENV_MCP_TRANSPORT)
        return True

    logger.debug("Defaulting to MCP stdio enabled")
    return True
