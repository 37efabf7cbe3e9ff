"""Crash handling utilities."""

import json
import os
import sys
import traceback

from ids.ksuid import generate_ksuid
from utils.timestamp import format_timestamp

# Default crash log path, can be overridden by configure()
_crash_log = "logs/crash.log"


def configure(crash_file):
    """Set crash log file path from config."""
    global _crash_log
    _crash_log = crash_file


def _crash_record(exc, tb=None, context=None):
    record = {
        "id": getattr(exc, "error_id", None) or generate_ksuid(),
        "timestamp": format_timestamp(),
        "type": type(exc).__name__ if exc else "Unknown",
        "msg": str(exc) if exc else "",
        "traceback": tb,
    }
    if context:
        record["context"] = context
    return record


def _write_crash(record):
    """Append crash record as a JSON line. Reports IO failures to stderr."""
    try:
        log_dir = os.path.dirname(_crash_log)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        with open(_crash_log, "a") as f:
            f.write(json.dumps(record, default=str) + "\n")
    except OSError as exc:
        sys.stderr.write(f"crash log {_crash_log} not writable: {exc}\n")


def log_crash(exc_type, exc_value, exc_tb):
    """Log sync crash to stderr and file."""
    tb = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
    record = _crash_record(exc_value, tb)

    sys.stderr.write(f"\n{'=' * 60}\nCRASH [{record['id']}] {record['timestamp']}\n{'=' * 60}\n")
    sys.stderr.write(f"{record['type']}: {record['msg']}\n{'-' * 60}\n{tb}{'=' * 60}\n\n")
    _write_crash(record)
    return record


def log_async_crash(exc, context_dict, logger=None):
    """Log async task crash."""
    tb = "".join(traceback.format_exception(exc)) if exc else None
    record = _crash_record(exc, tb, str(context_dict))
    if not exc:
        record["type"] = "AsyncError"
        record["msg"] = context_dict.get("message", "Unknown")

    if logger:
        logger.error("Async exception", error=record["msg"], crash_id=record["id"],
                     task=str(context_dict.get("future", "unknown")))

    _write_crash(record)
    return record


def create_async_handler(logger=None):
    """Create async exception handler for event loop."""
    def handler(loop, context):
        log_async_crash(context.get("exception"), context, logger)
    return handler


def install_crash_handler():
    """Install global sync exception handler."""
    sys.excepthook = log_crash
