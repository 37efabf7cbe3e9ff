"""Pytest fixtures for all tests."""

import io
import json

import pytest
from httpx import AsyncClient, ASGITransport

from api.app import create_app
from config import Config, SnowflakeConfig
from ids.registry import Generators
from ids.sequencer import MonotonicClockSequencer
from internal.logging import LogLevel, StructuredLogger

# 2023-11-14T22:13:20Z
START_MS = 1_700_000_000_000


class FakeClock:
    """Millisecond clock that only moves when told to, or when slept on."""

    def __init__(self, now=START_MS, step_ms=1):
        self.now = now
        self.step_ms = step_ms
        self.sleeps = 0

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps += 1
        self.now += self.step_ms

    def advance(self, ms=1):
        self.now += ms


class SequenceRandom:
    """Deterministic random source: each call returns the next counter value."""

    def __init__(self, start=0):
        self.counter = start
        self.calls = 0

    def __call__(self, n):
        self.calls += 1
        value = self.counter
        self.counter += 1
        return value.to_bytes(n, "big")


def zero_random(n):
    return bytes(n)


@pytest.fixture
def clock():
    """Fake clock at a fixed instant."""
    return FakeClock()


@pytest.fixture
def sequencer(clock):
    """Sequencer driven by the fake clock with zero-duration sleeps."""
    return MonotonicClockSequencer(clock=clock, sleep=clock.sleep)


@pytest.fixture
def log_stream():
    """Capture structured log lines; yields a function returning parsed records."""
    stream = io.StringIO()
    StructuredLogger.configure(min_level=LogLevel.DEBUG, stream=stream)

    def records():
        return [json.loads(line) for line in stream.getvalue().splitlines()]

    yield records
    StructuredLogger.configure()


@pytest.fixture
def app_config():
    """Service config with a known worker identity."""
    return Config(snowflake=SnowflakeConfig(epoch="2024-01-01T00:00:00Z", worker_id=3, datacenter_id=2))


@pytest.fixture
def generators(app_config, clock):
    """Generators wired to the fake clock."""
    return Generators.from_config(app_config, clock=clock, sleep=clock.sleep)


@pytest.fixture
async def app(app_config, generators):
    """Create test FastAPI app."""
    return create_app(app_config, generators)


@pytest.fixture
async def client(app):
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
