"""
Unit tests for server configuration.
"""

import pytest

from hddp.config import ServerConfig


class TestServerConfig:
    """Tests for ServerConfig class."""

    def test_defaults(self):
        """Test default values."""
        config = ServerConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.buffer_size == 1024
        assert config.timeout is None
        assert config.pages_dir == "pages"
        config.validate()

    def test_port_zero_allowed(self):
        """Test that port 0 (ephemeral) validates."""
        ServerConfig(port=0).validate()

    @pytest.mark.parametrize("kwargs", [
        {"port": -1},
        {"port": 65536},
        {"backlog": 0},
        {"buffer_size": 0},
        {"timeout": 0},
        {"timeout": -1.5},
        {"log_level": "VERBOSE"},
    ])
    def test_invalid_values(self, kwargs):
        """Test that bad settings fail validation."""
        with pytest.raises(ValueError):
            ServerConfig(**kwargs).validate()

    def test_log_level_case_insensitive(self):
        """Test that lowercase log levels validate."""
        ServerConfig(log_level="debug").validate()

    def test_from_env(self, monkeypatch):
        """Test reading configuration from HDDP_* variables."""
        monkeypatch.setenv("HDDP_HOST", "0.0.0.0")
        monkeypatch.setenv("HDDP_PORT", "3000")
        monkeypatch.setenv("HDDP_PAGES_DIR", "/srv/pages")
        monkeypatch.setenv("HDDP_BUFFER_SIZE", "4096")
        monkeypatch.setenv("HDDP_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.host == "0.0.0.0"
        assert config.port == 3000
        assert config.pages_dir == "/srv/pages"
        assert config.buffer_size == 4096
        assert config.log_level == "DEBUG"

    def test_from_env_defaults(self, monkeypatch):
        """Test that unset variables fall back to defaults."""
        for name in ("HDDP_HOST", "HDDP_PORT", "HDDP_PAGES_DIR", "HDDP_BUFFER_SIZE", "HDDP_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        assert ServerConfig.from_env() == ServerConfig()
