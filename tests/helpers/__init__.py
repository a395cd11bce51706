"""Test helpers for Confidential Aid tests.

Helpers:
    FakeTimeAuthority: Controllable time authority for deterministic tests
    ALICE, BOB: Wallet identities

Usage:
    from tests.helpers import FakeTimeAuthority
"""

from tests.helpers.fake_time_authority import FakeTimeAuthority
from tests.helpers.identities import ALICE, BOB

__all__ = ["ALICE", "BOB", "FakeTimeAuthority"]
