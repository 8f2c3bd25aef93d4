"""
Centralized configuration management for the carrier dashboard.

This module provides a single source of truth for all configuration values,
supporting:
- JSON configuration file (xsip.json)
- Environment variable overrides
- Programmatic defaults

Configuration is loaded in priority order:
1. Environment variables (highest priority)
2. JSON config file
3. Dataclass defaults (lowest priority)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TENANT = "default"

# Default config file locations (searched in order)
CONFIG_FILE_PATHS = [
    Path("xsip.json"),
    Path("./config/xsip.json"),
    Path.home() / ".xsip" / "xsip.json",
    Path("/etc/xsip/xsip.json"),
]


def _load_config_file() -> dict[str, Any]:
    """Load configuration from JSON file.

    Searches for config file in standard locations, or uses
    CONFIG_FILE environment variable if set.

    Returns:
        Dictionary of configuration values, or empty dict if no file found.
    """
    env_config_path = os.getenv("CONFIG_FILE")
    if env_config_path:
        config_path = Path(env_config_path)
        if config_path.exists():
            with config_path.open() as f:
                return json.load(f)
        else:
            logger.warning(f"CONFIG_FILE specified but not found: {env_config_path}")

    for path in CONFIG_FILE_PATHS:
        if path.exists():
            with path.open() as f:
                return json.load(f)

    return {}


def _get_env_or_config(
    env_key: str,
    config_dict: dict[str, Any],
    config_key: str,
    default: Any,
    type_cast: type | None = None
) -> Any:
    """Get value from environment, config file, or default (in priority order).

    Args:
        env_key: Environment variable name
        config_dict: Config dictionary section
        config_key: Key within config dictionary
        default: Default value if not found
        type_cast: Optional type to cast the value to

    Returns:
        Configuration value from highest priority source
    """
    env_value = os.getenv(env_key)
    if env_value is not None:
        if type_cast is bool:
            return env_value.lower() in ("true", "1", "yes")
        return type_cast(env_value) if type_cast else env_value

    if config_key in config_dict:
        return config_dict[config_key]

    return default


@dataclass(frozen=True)
class BackendConfig:
    """Configuration for the carrier backend client.

    ``timeout_seconds`` defaults to None, leaving requests' transport default
    (no timeout) in place.
    """

    endpoint: str = "http://localhost:8080"
    timeout_seconds: float | None = None
    pool_connections: int = 10
    pool_maxsize: int = 10

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> BackendConfig:
        """Create configuration from config dict with environment overrides."""
        backend_config = config.get("backend", {})
        return cls(
            endpoint=_get_env_or_config("XSIP_BACKEND_URL", backend_config, "endpoint", cls.endpoint),
            timeout_seconds=_get_env_or_config(
                "XSIP_BACKEND_TIMEOUT", backend_config, "timeout_seconds", cls.timeout_seconds, float
            ),
            pool_connections=backend_config.get("pool_connections", cls.pool_connections),
            pool_maxsize=backend_config.get("pool_maxsize", cls.pool_maxsize),
        )

    @classmethod
    def from_env(cls) -> BackendConfig:
        """Create configuration from environment variables and config file."""
        return cls.from_config(_load_config_file())


@dataclass(frozen=True)
class SyncConfig:
    """Configuration for polling, rendering and the activity feed."""

    poll_interval_seconds: float = 4.0
    activity_log_capacity: int = 20
    throughput_window: int = 15
    discard_stale_responses: bool = False
    default_tenant: str = DEFAULT_TENANT

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> SyncConfig:
        """Create configuration from config dict with environment overrides."""
        sync_config = config.get("sync", {})
        return cls(
            poll_interval_seconds=_get_env_or_config(
                "XSIP_POLL_INTERVAL", sync_config, "poll_interval_seconds", cls.poll_interval_seconds, float
            ),
            activity_log_capacity=sync_config.get("activity_log_capacity", cls.activity_log_capacity),
            throughput_window=sync_config.get("throughput_window", cls.throughput_window),
            discard_stale_responses=_get_env_or_config(
                "XSIP_DISCARD_STALE", sync_config, "discard_stale_responses", cls.discard_stale_responses, bool
            ),
            default_tenant=sync_config.get("default_tenant", cls.default_tenant),
        )


@dataclass(frozen=True)
class ServerConfig:
    """Configuration for the dashboard HTTP server."""

    host: str = "0.0.0.0"
    port: int = 8050
    access_log: bool = True

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> ServerConfig:
        """Create configuration from config dict with environment overrides."""
        server_config = config.get("server", {})
        return cls(
            host=_get_env_or_config("XSIP_DASHBOARD_HOST", server_config, "host", cls.host),
            port=_get_env_or_config("XSIP_DASHBOARD_PORT", server_config, "port", cls.port, int),
            access_log=_get_env_or_config("XSIP_ACCESS_LOG", server_config, "access_log", cls.access_log, bool),
        )


@dataclass(frozen=True)
class DashboardConfig:
    """Root configuration aggregating all sub-configurations."""

    backend: BackendConfig = field(default_factory=BackendConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    # Track which config file was loaded (if any)
    config_file_path: str | None = None

    @classmethod
    def from_file(cls, file_path: str | Path) -> DashboardConfig:
        """Load configuration from a specific JSON file.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            json.JSONDecodeError: If the file contains invalid JSON.
        """
        path = Path(file_path)
        with path.open() as f:
            config_dict = json.load(f)
        return cls.from_config(config_dict, config_file_path=str(path))

    @classmethod
    def from_config(cls, config: dict[str, Any], config_file_path: str | None = None) -> DashboardConfig:
        """Create full configuration from config dictionary."""
        return cls(
            backend=BackendConfig.from_config(config),
            sync=SyncConfig.from_config(config),
            server=ServerConfig.from_config(config),
            config_file_path=config_file_path,
        )

    @classmethod
    def from_env(cls) -> DashboardConfig:
        """Create full configuration from config file and environment variables.

        Searches for config file in standard locations, then applies
        environment variable overrides.
        """
        config_dict = _load_config_file()

        config_path = None
        env_config = os.getenv("CONFIG_FILE")
        if env_config and Path(env_config).exists():
            config_path = env_config
        else:
            for path in CONFIG_FILE_PATHS:
                if path.exists():
                    config_path = str(path)
                    break

        return cls.from_config(config_dict, config_file_path=config_path)

    @classmethod
    def default(cls) -> DashboardConfig:
        """Create configuration with all defaults (no file loading)."""
        return cls()


# Global configuration instance - can be overridden for testing
_config: DashboardConfig | None = None


def get_config() -> DashboardConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = DashboardConfig.from_env()
    return _config


def set_config(config: DashboardConfig) -> None:
    """Set the global configuration instance (useful for testing)."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset configuration to be reloaded on next access."""
    global _config
    _config = None
