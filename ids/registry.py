from ids.ksuid import KsuidGenerator
from ids.sequencer import MonotonicClockSequencer
from ids.snowflake import SnowflakeGenerator
from ids.ulid import UlidGenerator


class Generators:
    """The generators one process shares between all callers."""

    __slots__ = ("snowflake", "ulid", "ksuid")

    def __init__(self, snowflake, ulid, ksuid):
        self.snowflake = snowflake
        self.ulid = ulid
        self.ksuid = ksuid

    @classmethod
    def from_config(cls, config, clock=None, sleep=None, random_bytes=None):
        sequencer = MonotonicClockSequencer(clock=clock, sleep=sleep, max_wait_ms=config.snowflake.max_wait_ms)
        return cls(
            SnowflakeGenerator(config.snowflake.identity, sequencer),
            UlidGenerator(monotonic=config.ulid.monotonic, clock=clock, random_bytes=random_bytes),
            KsuidGenerator(clock=clock, random_bytes=random_bytes),
        )
