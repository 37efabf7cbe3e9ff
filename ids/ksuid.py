"""
KSUID - K-Sortable Unique Identifier.

Time-sortable, globally unique IDs without coordination.
Format: 4 bytes timestamp + 16 bytes random = 27 char base62 string.
"""

import os
import struct
import threading

from core.errors import EncodingError
from ids.radix import BASE62, decode, encode
from utils.timestamp import now_millis

# KSUID epoch: 2014-05-13
KSUID_EPOCH = 1400000000
KSUID_LENGTH = 27
PAYLOAD_BYTES = 16
RAW_BYTES = 4 + PAYLOAD_BYTES

MAX_TIMESTAMP = 0xFFFFFFFF


class KsuidGenerator:
    """Stateless apart from its injected clock (ms) and random source."""

    def __init__(self, clock=None, random_bytes=None):
        self._clock = clock or now_millis
        self._random_bytes = random_bytes or os.urandom

    def generate_bytes(self):
        # 4 bytes: seconds since KSUID epoch, clamped to the field
        timestamp = self._clock() // 1000 - KSUID_EPOCH
        timestamp = min(max(timestamp, 0), MAX_TIMESTAMP)
        return struct.pack(">I", timestamp) + self._random_bytes(PAYLOAD_BYTES)

    def generate(self):
        """Generate a 27-character sortable unique ID."""
        return encode_ksuid(self.generate_bytes())


def encode_ksuid(raw):
    if len(raw) != RAW_BYTES:
        raise EncodingError(f"KSUID payload must be {RAW_BYTES} bytes", value=bytes(raw).hex())
    text = encode(raw, BASE62)
    if len(text) > KSUID_LENGTH:
        raise EncodingError(f"KSUID encoding exceeds {KSUID_LENGTH} characters", value=text)
    return text.rjust(KSUID_LENGTH, BASE62.zero)


def parse_ksuid(text):
    """Split a KSUID string into (unix_seconds, 16-byte payload)."""
    if not isinstance(text, str) or len(text) != KSUID_LENGTH:
        raise EncodingError(f"KSUID must be {KSUID_LENGTH} characters", value=text)
    raw = decode(text, BASE62, size=RAW_BYTES)
    timestamp, = struct.unpack(">I", raw[:4])
    return timestamp + KSUID_EPOCH, raw[4:]


_default = None
_default_lock = threading.Lock()


def generate_ksuid():
    """Generate a KSUID from the process default generator."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = KsuidGenerator()
    return _default.generate()
