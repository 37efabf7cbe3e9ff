"""Identifier generation and inspection routes.

Handlers are plain functions so FastAPI runs them in its threadpool; the
generators do their own locking and may block briefly on the clock.
"""

from fastapi import APIRouter, Query

from ids.ksuid import parse_ksuid
from ids.ulid import encode_ulid, parse_ulid, TIMESTAMP_BYTES
from utils.timestamp import format_millis

MAX_BATCH = 1000

router = APIRouter(prefix="/api/v1/ids", tags=["ids"])

# Set by app.py
_generators = None


def init(generators):
    """Initialize with the shared generators."""
    global _generators
    _generators = generators


@router.get("/snowflake")
def snowflake_ids(count: int = Query(1, ge=1, le=MAX_BATCH)):
    """Snowflake ids as decimal strings (64-bit values overflow JS numbers)."""
    return {"kind": "snowflake", "ids": [_generators.snowflake.next_id() for _ in range(count)]}


@router.get("/snowflake/{value}")
def inspect_snowflake(value: str):
    parts = _generators.snowflake.decompose(value)
    return {"id": value, "time": format_millis(parts.timestamp_ms), **parts.to_dict()}


@router.get("/ulid")
def ulid_ids(count: int = Query(1, ge=1, le=MAX_BATCH)):
    return {"kind": "ulid", "ids": [_generators.ulid.generate() for _ in range(count)]}


@router.get("/ulid/{value}")
def inspect_ulid(value: str):
    payload = parse_ulid(value)
    timestamp_ms = int.from_bytes(payload[:TIMESTAMP_BYTES], "big")
    return {
        "id": encode_ulid(payload),
        "timestamp_ms": timestamp_ms,
        "time": format_millis(timestamp_ms),
        "entropy": payload[TIMESTAMP_BYTES:].hex(),
    }


@router.get("/ksuid")
def ksuid_ids(count: int = Query(1, ge=1, le=MAX_BATCH)):
    return {"kind": "ksuid", "ids": [_generators.ksuid.generate() for _ in range(count)]}


@router.get("/ksuid/{value}")
def inspect_ksuid(value: str):
    timestamp_s, payload = parse_ksuid(value)
    return {
        "id": value,
        "timestamp_s": timestamp_s,
        "time": format_millis(timestamp_s * 1000),
        "payload": payload.hex(),
    }
