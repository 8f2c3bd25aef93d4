"""
Tests for configuration module.
"""

from __future__ import annotations

import json
import os
from unittest.mock import patch

import pytest

from xsip_dashboard.core import (
    BackendConfig,
    DashboardConfig,
    ServerConfig,
    SyncConfig,
    get_config,
    reset_config,
    set_config,
)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Run each test away from any real config file or XSIP_* variable."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("XSIP_") or key == "CONFIG_FILE":
            monkeypatch.delenv(key)
    with patch("xsip_dashboard.core.config.CONFIG_FILE_PATHS", []):
        yield
    reset_config()


class TestBackendConfig:
    """Tests for backend client configuration."""

    def test_default_values(self):
        """Test default configuration values."""
        config = BackendConfig()
        assert config.endpoint == "http://localhost:8080"
        assert config.timeout_seconds is None
        assert config.pool_connections == 10

    def test_from_env(self):
        """Test loading from environment variables."""
        with patch.dict(os.environ, {
            "XSIP_BACKEND_URL": "http://carrier:9000",
            "XSIP_BACKEND_TIMEOUT": "2.5",
        }):
            config = BackendConfig.from_env()
            assert config.endpoint == "http://carrier:9000"
            assert config.timeout_seconds == 2.5

    def test_immutability(self):
        """Test that config is immutable (frozen)."""
        config = BackendConfig()
        with pytest.raises(Exception):  # FrozenInstanceError
            config.endpoint = "http://elsewhere"


class TestSyncConfig:
    """Tests for polling configuration."""

    def test_default_values(self):
        """Test the dashboard polls every four seconds and keeps 20 entries."""
        config = SyncConfig()
        assert config.poll_interval_seconds == 4.0
        assert config.activity_log_capacity == 20
        assert config.discard_stale_responses is False
        assert config.default_tenant == "default"

    def test_env_overrides(self):
        """Test interval and stale handling come from the environment."""
        with patch.dict(os.environ, {"XSIP_POLL_INTERVAL": "1.5", "XSIP_DISCARD_STALE": "yes"}):
            config = SyncConfig.from_config({})
            assert config.poll_interval_seconds == 1.5
            assert config.discard_stale_responses is True


class TestServerConfig:
    """Tests for server configuration."""

    def test_env_overrides(self):
        """Test host, port and access log come from the environment."""
        with patch.dict(os.environ, {
            "XSIP_DASHBOARD_HOST": "127.0.0.1",
            "XSIP_DASHBOARD_PORT": "9999",
            "XSIP_ACCESS_LOG": "0",
        }):
            config = ServerConfig.from_config({})
            assert config.host == "127.0.0.1"
            assert config.port == 9999
            assert config.access_log is False


class TestDashboardConfig:
    """Tests for root configuration."""

    def test_default(self):
        """Test defaults need no file."""
        config = DashboardConfig.default()
        assert config.server.port == 8050
        assert config.config_file_path is None

    def test_from_file(self, tmp_path):
        """Test loading every section from a JSON file."""
        path = tmp_path / "xsip.json"
        path.write_text(json.dumps({
            "backend": {"endpoint": "http://file:8080", "pool_maxsize": 4},
            "sync": {"poll_interval_seconds": 2, "activity_log_capacity": 5},
            "server": {"port": 9090},
        }))
        config = DashboardConfig.from_file(path)
        assert config.backend.endpoint == "http://file:8080"
        assert config.backend.pool_maxsize == 4
        assert config.sync.poll_interval_seconds == 2
        assert config.sync.activity_log_capacity == 5
        assert config.server.port == 9090
        assert config.config_file_path == str(path)

    def test_env_beats_file(self, tmp_path):
        """Test environment variables override file values."""
        path = tmp_path / "xsip.json"
        path.write_text(json.dumps({"backend": {"endpoint": "http://file:8080"}}))
        with patch.dict(os.environ, {"XSIP_BACKEND_URL": "http://env:8080"}):
            config = DashboardConfig.from_file(path)
        assert config.backend.endpoint == "http://env:8080"

    def test_config_file_env(self, tmp_path):
        """Test CONFIG_FILE points from_env at a specific file."""
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"sync": {"throughput_window": 30}}))
        with patch.dict(os.environ, {"CONFIG_FILE": str(path)}):
            config = DashboardConfig.from_env()
        assert config.sync.throughput_window == 30
        assert config.config_file_path == str(path)

    def test_missing_config_file_env(self, tmp_path):
        """Test a missing CONFIG_FILE falls back to defaults."""
        with patch.dict(os.environ, {"CONFIG_FILE": str(tmp_path / "missing.json")}):
            config = DashboardConfig.from_env()
        assert config == DashboardConfig()

    def test_missing_file_raises(self, tmp_path):
        """Test from_file requires the file to exist."""
        with pytest.raises(FileNotFoundError):
            DashboardConfig.from_file(tmp_path / "nope.json")


class TestGlobalConfig:
    """Tests for the process-wide configuration."""

    def test_set_and_get(self):
        """Test set_config replaces the global instance."""
        config = DashboardConfig(server=ServerConfig(port=1234))
        set_config(config)
        assert get_config() is config

    def test_reset_reloads(self):
        """Test reset_config forces a reload on next access."""
        set_config(DashboardConfig(server=ServerConfig(port=1234)))
        reset_config()
        assert get_config().server.port == 8050
