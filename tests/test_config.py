"""Unit tests for configuration loading."""

import json

import pytest
from config import (
    Config,
    SnowflakeConfig,
    UlidConfig,
    ServerConfig,
    LoggingConfig,
    load_config,
)
from core.errors import ConfigurationError
from ids.snowflake import DEFAULT_EPOCH_MS


class TestSnowflakeConfig:
    """Tests for SnowflakeConfig class."""

    def test_default_values(self):
        """SnowflakeConfig has sensible defaults."""
        config = SnowflakeConfig()
        assert config.epoch == DEFAULT_EPOCH_MS
        assert config.worker_id == 0
        assert config.datacenter_id == 0
        assert config.max_wait_ms is None

    def test_builds_identity(self):
        """Epoch strings are normalized to milliseconds."""
        config = SnowflakeConfig(epoch="2024-01-01T00:00:00Z", worker_id=4, datacenter_id=9)
        assert config.identity.epoch_ms == 1704067200000
        assert config.identity.worker_id == 4
        assert config.identity.datacenter_id == 9

    def test_validates_eagerly(self):
        """Out-of-range ids fail at construction."""
        with pytest.raises(ConfigurationError):
            SnowflakeConfig(worker_id=40)
        with pytest.raises(ConfigurationError):
            SnowflakeConfig(epoch="not a date")

    @pytest.mark.parametrize("value", ["5", -1, True, [10]])
    def test_rejects_bad_max_wait(self, value):
        """max_wait_ms must be null or a non-negative number."""
        with pytest.raises(ConfigurationError) as exc_info:
            SnowflakeConfig(max_wait_ms=value)
        assert exc_info.value.context["field"] == "max_wait_ms"

    def test_accepts_zero_max_wait(self):
        assert SnowflakeConfig(max_wait_ms=0).max_wait_ms == 0
        assert SnowflakeConfig(max_wait_ms=2.5).max_wait_ms == 2.5


class TestUlidConfig:
    """Tests for UlidConfig class."""

    def test_default_values(self):
        assert UlidConfig().monotonic is True

    def test_custom_values(self):
        assert UlidConfig(monotonic=False).monotonic is False


class TestServerConfig:
    """Tests for ServerConfig class."""

    def test_default_values(self):
        """ServerConfig has sensible defaults."""
        config = ServerConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 8080

    def test_custom_values(self):
        """ServerConfig accepts custom values."""
        config = ServerConfig(host="0.0.0.0", port=9000)
        assert config.host == "0.0.0.0"
        assert config.port == 9000


class TestLoggingConfig:
    """Tests for LoggingConfig class."""

    def test_default_values(self):
        """LoggingConfig has sensible defaults."""
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.crash_file == "logs/crash.log"

    def test_custom_values(self):
        config = LoggingConfig(level="DEBUG", crash_file="/var/log/crash.log")
        assert config.level == "DEBUG"
        assert config.crash_file == "/var/log/crash.log"


class TestConfig:
    """Tests for main Config class."""

    def test_default_config(self):
        """Config creates default sub-configs."""
        config = Config()
        assert isinstance(config.snowflake, SnowflakeConfig)
        assert isinstance(config.ulid, UlidConfig)
        assert isinstance(config.server, ServerConfig)
        assert isinstance(config.logging, LoggingConfig)

    def test_from_dict(self):
        """Config.from_dict parses dictionary."""
        data = {
            "snowflake": {"epoch": 1600000000000, "worker_id": 5, "datacenter_id": 6, "max_wait_ms": 50},
            "ulid": {"monotonic": False},
            "server": {"port": 9000},
            "logging": {"level": "DEBUG"},
        }
        config = Config.from_dict(data)
        assert config.snowflake.identity.epoch_ms == 1600000000000
        assert config.snowflake.worker_id == 5
        assert config.snowflake.max_wait_ms == 50
        assert config.ulid.monotonic is False
        assert config.server.port == 9000
        assert config.logging.level == "DEBUG"

    def test_from_dict_partial(self):
        """Config.from_dict handles partial data."""
        config = Config.from_dict({"snowflake": {"worker_id": 2}})
        assert config.snowflake.worker_id == 2
        assert config.server.port == 8080  # Default

    def test_from_dict_invalid(self):
        with pytest.raises(ConfigurationError):
            Config.from_dict({"snowflake": {"datacenter_id": -1}})
        with pytest.raises(ConfigurationError):
            Config.from_dict({"snowflake": {"max_wait_ms": "250"}})


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_config_returns_config(self):
        """load_config returns Config object."""
        config = load_config()
        assert isinstance(config, Config)

    def test_load_config_reads_file(self):
        """load_config reads from config.json."""
        config = load_config()
        assert config.snowflake.worker_id == 1
        assert config.snowflake.datacenter_id == 1
        assert config.snowflake.identity.epoch_ms == 1704067200000

    def test_load_config_custom_path(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"snowflake": {"worker_id": 30}}))
        assert load_config(path).snowflake.worker_id == 30

    def test_load_config_missing_file(self, tmp_path):
        """load_config returns defaults for missing file."""
        config = load_config(tmp_path / "nonexistent.json")
        assert isinstance(config, Config)
        assert config.snowflake.worker_id == 0  # Default
