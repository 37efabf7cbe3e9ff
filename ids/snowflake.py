"""
Snowflake - 64-bit time-ordered integer IDs.

Layout: 41 bits ms since epoch | 5 bits datacenter | 5 bits worker | 12 bits sequence.
"""

from core.errors import ClockError, ConfigurationError, EncodingError
from ids.sequencer import MonotonicClockSequencer, SEQUENCE_BITS, SEQUENCE_MASK
from internal.logging import get_logger
from utils.timestamp import parse_iso_millis

# Twitter epoch: 2010-11-04T01:42:54.657Z
DEFAULT_EPOCH_MS = 1288834974657

WORKER_ID_BITS = 5
DATACENTER_ID_BITS = 5
TIMESTAMP_BITS = 41

MAX_WORKER_ID = (1 << WORKER_ID_BITS) - 1
MAX_DATACENTER_ID = (1 << DATACENTER_ID_BITS) - 1
MAX_ELAPSED_MS = (1 << TIMESTAMP_BITS) - 1

WORKER_ID_SHIFT = SEQUENCE_BITS
DATACENTER_ID_SHIFT = SEQUENCE_BITS + WORKER_ID_BITS
TIMESTAMP_SHIFT = SEQUENCE_BITS + WORKER_ID_BITS + DATACENTER_ID_BITS


def normalize_epoch(epoch):
    """Epoch as int milliseconds, from an int or an ISO 8601 string."""
    if isinstance(epoch, bool):
        raise ConfigurationError("epoch must be milliseconds or an ISO 8601 string", field="epoch", value=epoch)
    if isinstance(epoch, int):
        if epoch < 0:
            raise ConfigurationError("epoch must not be negative", field="epoch", value=epoch)
        return epoch
    if isinstance(epoch, str):
        try:
            millis = parse_iso_millis(epoch)
        except ValueError as exc:
            raise ConfigurationError(f"unparseable epoch {epoch!r}", field="epoch", value=epoch, cause=exc) from exc
        if millis < 0:
            raise ConfigurationError("epoch must not precede 1970", field="epoch", value=epoch)
        return millis
    raise ConfigurationError("epoch must be milliseconds or an ISO 8601 string", field="epoch", value=epoch)


def _check_id(field, value, maximum):
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= maximum:
        raise ConfigurationError(f"{field} must be an integer in [0, {maximum}]", field=field, value=value)
    return value


class WorkerIdentity:
    """Epoch plus datacenter/worker ids. Read-only once built."""

    __slots__ = ("epoch_ms", "worker_id", "datacenter_id")

    def __init__(self, epoch=DEFAULT_EPOCH_MS, worker_id=0, datacenter_id=0):
        set_field = object.__setattr__
        set_field(self, "epoch_ms", normalize_epoch(epoch))
        set_field(self, "worker_id", _check_id("worker_id", worker_id, MAX_WORKER_ID))
        set_field(self, "datacenter_id", _check_id("datacenter_id", datacenter_id, MAX_DATACENTER_ID))

    def __setattr__(self, name, value):
        raise ConfigurationError("worker identity is read-only after construction", field=name, value=value)

    def __eq__(self, other):
        if not isinstance(other, WorkerIdentity):
            return NotImplemented
        return (self.epoch_ms, self.worker_id, self.datacenter_id) == \
               (other.epoch_ms, other.worker_id, other.datacenter_id)

    def __hash__(self):
        return hash((self.epoch_ms, self.worker_id, self.datacenter_id))

    def __repr__(self):
        return (f"WorkerIdentity(epoch_ms={self.epoch_ms}, worker_id={self.worker_id}, "
                f"datacenter_id={self.datacenter_id})")


class SnowflakeParts:
    __slots__ = ("timestamp_ms", "datacenter_id", "worker_id", "sequence")

    def __init__(self, timestamp_ms, datacenter_id, worker_id, sequence):
        self.timestamp_ms = timestamp_ms
        self.datacenter_id = datacenter_id
        self.worker_id = worker_id
        self.sequence = sequence

    def to_dict(self):
        return {
            "timestamp_ms": self.timestamp_ms,
            "datacenter_id": self.datacenter_id,
            "worker_id": self.worker_id,
            "sequence": self.sequence,
        }


class SnowflakeGenerator:
    """Packs sequencer output with a worker identity into 64-bit ids.

    Share one generator (or at least one sequencer) per identity; two
    sequencers for the same identity can hand out colliding ids.
    """

    def __init__(self, identity=None, sequencer=None):
        self.identity = identity or WorkerIdentity()
        self.sequencer = sequencer or MonotonicClockSequencer()
        get_logger().info("snowflake generator ready", worker_id=self.identity.worker_id,
                          datacenter_id=self.identity.datacenter_id, epoch_ms=self.identity.epoch_ms)

    def generate(self):
        """Next id as an unsigned 64-bit int."""
        time_ms, sequence = self.sequencer.next()
        identity = self.identity
        elapsed = time_ms - identity.epoch_ms
        if elapsed < 0 or elapsed > MAX_ELAPSED_MS:
            raise ClockError("timestamp outside the 41-bit range of the configured epoch",
                             timestamp_ms=time_ms, context={"epoch_ms": identity.epoch_ms})
        return (elapsed << TIMESTAMP_SHIFT) | \
               (identity.datacenter_id << DATACENTER_ID_SHIFT) | \
               (identity.worker_id << WORKER_ID_SHIFT) | \
               sequence

    def next_id(self):
        """Next id as decimal text."""
        return str(self.generate())

    def decompose(self, value):
        return decompose(value, self.identity.epoch_ms)


def decompose(value, epoch_ms=DEFAULT_EPOCH_MS):
    """Split a snowflake (int or decimal string) back into its fields."""
    if isinstance(value, str):
        if not (value.isascii() and value.isdigit()):
            raise EncodingError("snowflake must be decimal digits", value=value)
        value = int(value)
    if not 0 <= value < (1 << 64):
        raise EncodingError("snowflake must fit in 64 unsigned bits", value=str(value))
    return SnowflakeParts(
        timestamp_ms=(value >> TIMESTAMP_SHIFT) + epoch_ms,
        datacenter_id=(value >> DATACENTER_ID_SHIFT) & MAX_DATACENTER_ID,
        worker_id=(value >> WORKER_ID_SHIFT) & MAX_WORKER_ID,
        sequence=value & SEQUENCE_MASK,
    )
