"""
ULID - Universally Unique Lexicographically Sortable Identifier.

Format: 6 bytes ms timestamp + 10 bytes entropy = 26 char Crockford base32.
In monotonic mode, ids from the same millisecond reuse the timestamp and
increment the previous entropy, so they still sort in generation order.
"""

import os
import threading

from core.errors import EncodingError, EntropyExhaustion, ClockError
from ids.radix import BASE32_CROCKFORD
from internal.logging import get_logger
from utils.timestamp import now_millis

TIMESTAMP_BYTES = 6
ENTROPY_BYTES = 10
PAYLOAD_BYTES = TIMESTAMP_BYTES + ENTROPY_BYTES

TIMESTAMP_CHARS = 10
ENTROPY_CHARS = 16
ULID_LENGTH = TIMESTAMP_CHARS + ENTROPY_CHARS

MAX_TIMESTAMP_MS = (1 << 48) - 1

# Crockford decoding is case-insensitive and forgives look-alike letters
_ALIASES = str.maketrans({"I": "1", "L": "1", "O": "0"})


def _encode_fixed(value, length):
    chars = []
    for _ in range(length):
        value, remainder = divmod(value, 32)
        chars.append(BASE32_CROCKFORD[remainder])
    return "".join(reversed(chars))


def _slice_bits(data):
    """Slice bytes into 5-bit groups; the last group is zero-padded."""
    chars = []
    buffer = bits = 0
    for byte in data:
        buffer = (buffer << 8) | byte
        bits += 8
        while bits >= 5:
            bits -= 5
            chars.append(BASE32_CROCKFORD[(buffer >> bits) & 0x1F])
        buffer &= (1 << bits) - 1
    if bits:
        chars.append(BASE32_CROCKFORD[(buffer << (5 - bits)) & 0x1F])
    return "".join(chars)


def _unslice_bits(text, size):
    out = bytearray()
    buffer = bits = 0
    for symbol in text:
        buffer = (buffer << 5) | BASE32_CROCKFORD.index(symbol)
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1
    return bytes(out[:size])


def increment_entropy(entropy):
    """Big-endian +1 with carry. Returns None when every byte wraps."""
    bumped = bytearray(entropy)
    for i in range(len(bumped) - 1, -1, -1):
        if bumped[i] < 0xFF:
            bumped[i] += 1
            return bytes(bumped)
        bumped[i] = 0
    return None


def encode_ulid(payload):
    """Encode a 16-byte payload as a 26-char ULID string."""
    if len(payload) != PAYLOAD_BYTES:
        raise EncodingError(f"ULID payload must be {PAYLOAD_BYTES} bytes", value=bytes(payload).hex())
    timestamp = int.from_bytes(payload[:TIMESTAMP_BYTES], "big")
    return _encode_fixed(timestamp, TIMESTAMP_CHARS) + _slice_bits(payload[TIMESTAMP_BYTES:])


def parse_ulid(text):
    """Decode a ULID string into its 16-byte payload."""
    if not isinstance(text, str) or len(text) != ULID_LENGTH:
        raise EncodingError(f"ULID must be {ULID_LENGTH} characters", value=text)
    # str.upper() can change length or map non-ASCII letters onto ASCII ones
    if not text.isascii():
        raise EncodingError("ULID must be ASCII", value=text)
    normalized = text.upper().translate(_ALIASES)

    timestamp = 0
    for symbol in normalized[:TIMESTAMP_CHARS]:
        timestamp = timestamp * 32 + BASE32_CROCKFORD.index(symbol)
    if timestamp > MAX_TIMESTAMP_MS:
        raise EncodingError("ULID timestamp exceeds 48 bits", value=text)

    entropy = _unslice_bits(normalized[TIMESTAMP_CHARS:], ENTROPY_BYTES)
    return timestamp.to_bytes(TIMESTAMP_BYTES, "big") + entropy


def ulid_timestamp(text):
    """Millisecond timestamp carried by a ULID string."""
    return int.from_bytes(parse_ulid(text)[:TIMESTAMP_BYTES], "big")


class UlidGenerator:
    """Thread-safe ULID source.

    The (last_time_ms, last_entropy) state belongs to the instance; callers
    that need a shared ordering share the generator.
    """

    def __init__(self, monotonic=True, clock=None, random_bytes=None):
        self.monotonic = monotonic
        self._clock = clock or now_millis
        self._random_bytes = random_bytes or os.urandom
        self._lock = threading.Lock()
        self._last_time_ms = -1
        self._last_entropy = None
        self._log = get_logger()

    @property
    def last_time_ms(self):
        return self._last_time_ms

    def generate_bytes(self):
        """Next 16-byte ULID payload."""
        with self._lock:
            timestamp = self._clock()
            if timestamp < 0 or timestamp > MAX_TIMESTAMP_MS:
                raise ClockError("timestamp outside the 48-bit ULID range", timestamp_ms=timestamp)

            if self.monotonic and self._last_entropy is not None and timestamp <= self._last_time_ms:
                # Same ms, or the clock stepped back: stay on the last timestamp
                timestamp = self._last_time_ms
                entropy = increment_entropy(self._last_entropy)
                if entropy is None:
                    self._log.error("ULID entropy exhausted", timestamp_ms=timestamp)
                    raise EntropyExhaustion("80-bit entropy exhausted within one millisecond",
                                            timestamp_ms=timestamp)
            else:
                entropy = self._random_bytes(ENTROPY_BYTES)

            self._last_time_ms = timestamp
            self._last_entropy = entropy

        return timestamp.to_bytes(TIMESTAMP_BYTES, "big") + entropy

    def generate(self):
        """Next ULID as a 26-char string."""
        return encode_ulid(self.generate_bytes())
