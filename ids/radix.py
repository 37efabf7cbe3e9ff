"""
Arbitrary-precision radix conversion for byte payloads.

Treats a byte string as a big-endian base-256 number and re-expresses it over
an arbitrary alphabet using digit-array long division, so payloads wider than
any machine word (16-byte ULIDs, 20-byte KSUIDs) convert exactly. Leading zero
bytes are kept as the same number of leading zero symbols, which makes
decode(encode(b)) == b for every byte string, including all-zero ones.
"""

from core.errors import EncodingError


class Alphabet:
    """Ordered set of unique symbols; index 0 is the zero symbol."""

    __slots__ = ("symbols", "base", "_index")

    def __init__(self, symbols):
        if len(symbols) < 2:
            raise EncodingError("alphabet needs at least two symbols", value=symbols)
        if len(set(symbols)) != len(symbols):
            raise EncodingError("alphabet symbols must be unique", value=symbols)
        self.symbols = symbols
        self.base = len(symbols)
        self._index = {symbol: i for i, symbol in enumerate(symbols)}

    @property
    def zero(self):
        return self.symbols[0]

    def index(self, symbol):
        try:
            return self._index[symbol]
        except KeyError:
            raise EncodingError(f"symbol {symbol!r} not in base{self.base} alphabet", value=symbol) from None

    def __len__(self):
        return self.base

    def __getitem__(self, i):
        return self.symbols[i]

    def __repr__(self):
        return f"Alphabet({self.symbols!r})"


# Crockford base32: no I, L, O, U
BASE32_CROCKFORD = Alphabet("0123456789ABCDEFGHJKMNPQRSTVWXYZ")
BASE58 = Alphabet("123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz")
BASE62 = Alphabet("0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz")


def as_alphabet(alphabet):
    if isinstance(alphabet, Alphabet):
        return alphabet
    return Alphabet(alphabet)


def _leading(seq, zero):
    count = 0
    for item in seq:
        if item != zero:
            break
        count += 1
    return count


def encode(data, alphabet):
    """Encode big-endian bytes as a string over `alphabet`."""
    alphabet = as_alphabet(alphabet)
    base = alphabet.base
    zeros = _leading(data, 0)

    digits = list(data[zeros:])
    out = []
    while digits:
        # One long-division pass: digits //= base, remainder is the next symbol
        quotient = []
        remainder = 0
        for digit in digits:
            remainder = remainder * 256 + digit
            q, remainder = divmod(remainder, base)
            if q or quotient:
                quotient.append(q)
        out.append(alphabet[remainder])
        digits = quotient

    out.reverse()
    return alphabet.zero * zeros + "".join(out)


def decode(text, alphabet, size=None):
    """Decode a string produced by encode() back into bytes.

    With `size`, the numeric value is returned left-padded to exactly `size`
    bytes, which suits fixed-width formats padded with extra zero symbols.
    """
    alphabet = as_alphabet(alphabet)
    base = alphabet.base
    zeros = _leading(text, alphabet.zero)

    # base-256 digits, most significant first
    digits = []
    for symbol in text[zeros:]:
        carry = alphabet.index(symbol)
        for i in range(len(digits) - 1, -1, -1):
            carry += digits[i] * base
            digits[i] = carry & 0xFF
            carry >>= 8
        while carry:
            digits.insert(0, carry & 0xFF)
            carry >>= 8

    if size is None:
        return bytes(zeros) + bytes(digits)
    if len(digits) > size:
        raise EncodingError(f"value does not fit in {size} bytes", value=text)
    return bytes(size - len(digits)) + bytes(digits)
