"""Unit tests for the clock implementations."""

from datetime import timedelta, timezone

import pytest

from confidential_aid.infrastructure.adapters import SystemTimeAuthority
from tests.helpers import FakeTimeAuthority


class TestSystemTimeAuthority:
    def test_utcnow_is_timezone_aware(self) -> None:
        now = SystemTimeAuthority().utcnow()
        assert now.utcoffset() == timedelta(0)
        assert now.tzinfo is timezone.utc


class TestFakeTimeAuthority:
    def test_advance_moves_utcnow(self) -> None:
        clock = FakeTimeAuthority()
        start = clock.utcnow()

        clock.advance(seconds=2.5)

        assert clock.utcnow() - start == timedelta(seconds=2.5)

    def test_cannot_go_backwards(self) -> None:
        with pytest.raises(ValueError, match="backwards"):
            FakeTimeAuthority().advance(seconds=-1)
