import threading
import time

from core.errors import ClockError, ConfigurationError
from internal.logging import get_logger
from utils.timestamp import now_millis

SEQUENCE_BITS = 12
SEQUENCE_MASK = (1 << SEQUENCE_BITS) - 1


def check_max_wait(max_wait_ms):
    """None (wait for ever) or a non-negative number of milliseconds."""
    if max_wait_ms is None:
        return None
    if isinstance(max_wait_ms, bool) or not isinstance(max_wait_ms, (int, float)) or not max_wait_ms >= 0:
        raise ConfigurationError("max_wait_ms must be a non-negative number or null",
                                 field="max_wait_ms", value=max_wait_ms)
    return max_wait_ms


class ClockState:
    __slots__ = ("last_time_ms", "sequence")

    def __init__(self, last_time_ms=-1, sequence=0):
        self.last_time_ms = last_time_ms
        self.sequence = sequence

    def as_tuple(self):
        return (self.last_time_ms, self.sequence)

    def __repr__(self):
        return f"ClockState(last_time_ms={self.last_time_ms}, sequence={self.sequence})"


class MonotonicClockSequencer:
    """Hands out non-decreasing (time_ms, sequence) pairs.

    Never emits a time older than one already emitted: a clock that steps
    backwards, or a millisecond with all 4096 sequence values used, makes the
    caller wait for the clock instead. Waits sleep outside the lock and
    re-check state on wake-up, so many blocked callers stay consistent.
    `max_wait_ms=None` waits for as long as the clock takes; any other value
    turns an over-long wait into a ClockError.
    """

    def __init__(self, clock=None, sleep=None, poll_interval_ms=0.1, max_wait_ms=None):
        self._clock = clock or now_millis
        self._sleep = sleep or time.sleep
        self._poll_interval_ms = poll_interval_ms
        self._max_wait_ms = check_max_wait(max_wait_ms)
        self._lock = threading.Lock()
        self._state = ClockState()
        self._log = get_logger()

    @property
    def state(self):
        with self._lock:
            return ClockState(self._state.last_time_ms, self._state.sequence)

    @property
    def clock(self):
        return self._clock

    def next(self, now_ms=None):
        """Return the next (time_ms, sequence) pair.

        `now_ms` is used as the first clock reading when given; any retry
        reads the injected clock.
        """
        wait_start = None
        slept_ms = 0.0
        while True:
            with self._lock:
                now = self._clock() if now_ms is None else now_ms
                now_ms = None
                state = self._state
                last = state.last_time_ms

                if now > last:
                    state.last_time_ms, state.sequence = now, 0
                    return now, 0
                if now == last and state.sequence < SEQUENCE_MASK:
                    state.sequence += 1
                    return now, state.sequence

            if wait_start is None:
                wait_start = now
                if now < last:
                    self._log.warn("clock moved backwards, waiting", now_ms=now, last_ms=last, behind_ms=last - now)
                else:
                    self._log.debug("sequence exhausted, waiting for next ms", last_ms=last)

            # Clock time since the wait began; sleep time covers a stalled clock
            waited_ms = max(now - wait_start, slept_ms)
            if self._max_wait_ms is not None and waited_ms >= self._max_wait_ms:
                raise ClockError(f"clock did not advance past {last} within {self._max_wait_ms}ms",
                                 timestamp_ms=now, context={"last_ms": last})
            self._sleep(self._poll_interval_ms / 1000)
            slept_ms += self._poll_interval_ms
