import json
from pathlib import Path

from ids.sequencer import check_max_wait
from ids.snowflake import DEFAULT_EPOCH_MS, WorkerIdentity

_DEFAULT_CONFIG = Path(__file__).parent / "config.json"


class SnowflakeConfig:
    __slots__ = ("epoch", "worker_id", "datacenter_id", "max_wait_ms", "identity")

    def __init__(self, epoch=DEFAULT_EPOCH_MS, worker_id=0, datacenter_id=0, max_wait_ms=None):
        self.epoch = epoch
        self.worker_id = worker_id
        self.datacenter_id = datacenter_id
        self.max_wait_ms = check_max_wait(max_wait_ms)
        # Validates eagerly; raises ConfigurationError
        self.identity = WorkerIdentity(epoch, worker_id, datacenter_id)


class UlidConfig:
    __slots__ = ("monotonic",)

    def __init__(self, monotonic=True):
        self.monotonic = monotonic


class ServerConfig:
    __slots__ = ("host", "port")

    def __init__(self, host="127.0.0.1", port=8080):
        self.host = host
        self.port = port


class LoggingConfig:
    __slots__ = ("level", "crash_file")

    def __init__(self, level="INFO", crash_file="logs/crash.log"):
        self.level = level
        self.crash_file = crash_file


class Config:
    __slots__ = ("snowflake", "ulid", "server", "logging")

    def __init__(self, snowflake=None, ulid=None, server=None, logging=None):
        self.snowflake = snowflake or SnowflakeConfig()
        self.ulid = ulid or UlidConfig()
        self.server = server or ServerConfig()
        self.logging = logging or LoggingConfig()

    @classmethod
    def from_dict(cls, d):
        return cls(
            SnowflakeConfig(**d.get("snowflake", {})),
            UlidConfig(**d.get("ulid", {})),
            ServerConfig(**d.get("server", {})),
            LoggingConfig(**d.get("logging", {})),
        )


def load_config(path=None):
    config_path = Path(path) if path else _DEFAULT_CONFIG

    if not config_path.exists():
        return Config()

    with open(config_path) as file:
        return Config.from_dict(json.load(file))
