"""Unit tests for KSUID generation."""

import pytest
from core.errors import EncodingError
from ids.ksuid import KSUID_EPOCH, KsuidGenerator, encode_ksuid, generate_ksuid, parse_ksuid
from ids.radix import BASE62
from tests.conftest import FakeClock, SequenceRandom, zero_random


class TestKSUID:
    """Tests for KSUID generation."""

    def test_generate_ksuid_returns_string(self):
        """KSUID is a string."""
        ksuid = generate_ksuid()
        assert isinstance(ksuid, str)

    def test_generate_ksuid_length(self):
        """KSUID has expected length."""
        for _ in range(200):
            ksuid = generate_ksuid()
            assert len(ksuid) == 27  # Base62 encoded
            assert all(char in BASE62.symbols for char in ksuid)

    def test_generate_ksuid_unique(self):
        """KSUIDs are unique."""
        ksuids = [generate_ksuid() for _ in range(100)]
        assert len(set(ksuids)) == 100

    def test_ksuid_sortable(self):
        """Later seconds sort after earlier ones."""
        clock = FakeClock()
        generator = KsuidGenerator(clock=clock)
        ksuid1 = generator.generate()
        clock.advance(1000)
        ksuid2 = generator.generate()
        assert ksuid2 > ksuid1

    def test_zero_payload_is_all_zero_symbols(self):
        """Timestamp 0 and zero random bytes pad out to 27 zero symbols."""
        clock = FakeClock(now=KSUID_EPOCH * 1000)
        ksuid = KsuidGenerator(clock=clock, random_bytes=zero_random).generate()
        assert ksuid == "0" * 27
        assert parse_ksuid(ksuid) == (KSUID_EPOCH, bytes(16))

    def test_clock_before_epoch_clamps_to_zero(self):
        clock = FakeClock(now=(KSUID_EPOCH - 3600) * 1000)
        generator = KsuidGenerator(clock=clock, random_bytes=zero_random)
        assert generator.generate_bytes()[:4] == bytes(4)

    def test_parse_recovers_fields(self):
        clock = FakeClock()
        generator = KsuidGenerator(clock=clock, random_bytes=SequenceRandom(start=12345))
        timestamp, payload = parse_ksuid(generator.generate())
        assert timestamp == clock.now // 1000
        assert int.from_bytes(payload, "big") == 12345

    def test_encode_round_trip(self):
        raw = b"\x00\x00\x00\x01" + bytes(range(16))
        assert parse_ksuid(encode_ksuid(raw)) == (KSUID_EPOCH + 1, bytes(range(16)))

    def test_max_value(self):
        ksuid = encode_ksuid(b"\xff" * 20)
        assert len(ksuid) == 27
        assert parse_ksuid(ksuid) == (KSUID_EPOCH + 0xFFFFFFFF, b"\xff" * 16)

    @pytest.mark.parametrize("text", ["", "0" * 26, "0" * 28, "0" * 26 + "-", "z" * 27])
    def test_parse_rejects_malformed(self, text):
        with pytest.raises(EncodingError):
            parse_ksuid(text)
