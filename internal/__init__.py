from internal.logging import LogLevel, StructuredLogger, get_logger
from utils.timestamp import now_millis, now_micros, format_timestamp
from core.errors import IdError, ConfigurationError, EncodingError, EntropyExhaustion, ClockError

__all__ = [
    "LogLevel",
    "StructuredLogger",
    "get_logger",
    "now_millis",
    "now_micros",
    "format_timestamp",
    "IdError",
    "ConfigurationError",
    "EncodingError",
    "EntropyExhaustion",
    "ClockError",
]
