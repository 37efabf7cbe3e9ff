"""Fixed-width short forms of binary identifiers (UUIDs and the like)."""

import math
import uuid

from core.errors import EncodingError
from ids.radix import BASE58, as_alphabet, decode, encode


def short_length(size, alphabet=BASE58):
    """Symbols needed for any `size`-byte value over `alphabet`."""
    return math.ceil(size * 8 / math.log2(as_alphabet(alphabet).base))


def shorten(raw, alphabet=BASE58):
    """Encode `raw` as a fixed-width string for its byte length."""
    alphabet = as_alphabet(alphabet)
    text = encode(raw, alphabet)
    width = short_length(len(raw), alphabet)
    if len(text) > width:
        # leading zero bytes each cost a full symbol; re-encode by value
        text = encode(raw.lstrip(b"\x00"), alphabet)
    return text.rjust(width, alphabet.zero)


def expand(text, size, alphabet=BASE58):
    """Inverse of shorten() for a known byte length."""
    alphabet = as_alphabet(alphabet)
    if len(text) != short_length(size, alphabet):
        raise EncodingError(f"short id for {size} bytes must be {short_length(size, alphabet)} symbols", value=text)
    return decode(text, alphabet, size=size)


def short_uuid(value):
    """22-symbol base58 form of a UUID (object or string)."""
    if not isinstance(value, uuid.UUID):
        try:
            value = uuid.UUID(str(value))
        except ValueError as exc:
            raise EncodingError("not a UUID", value=str(value), cause=exc) from exc
    return shorten(value.bytes)


def uuid_from_short(text):
    return uuid.UUID(bytes=expand(text, 16))
