from ids.radix import Alphabet, BASE32_CROCKFORD, BASE58, BASE62, encode, decode
from ids.sequencer import ClockState, MonotonicClockSequencer
from ids.snowflake import SnowflakeGenerator, SnowflakeParts, WorkerIdentity, decompose
from ids.ulid import UlidGenerator, encode_ulid, parse_ulid, ulid_timestamp
from ids.ksuid import KsuidGenerator, generate_ksuid, parse_ksuid
from ids.shortid import shorten, expand, short_uuid, uuid_from_short

__all__ = [
    "Alphabet",
    "BASE32_CROCKFORD",
    "BASE58",
    "BASE62",
    "encode",
    "decode",
    "ClockState",
    "MonotonicClockSequencer",
    "SnowflakeGenerator",
    "SnowflakeParts",
    "WorkerIdentity",
    "decompose",
    "UlidGenerator",
    "encode_ulid",
    "parse_ulid",
    "ulid_timestamp",
    "KsuidGenerator",
    "generate_ksuid",
    "parse_ksuid",
    "shorten",
    "expand",
    "short_uuid",
    "uuid_from_short",
]
