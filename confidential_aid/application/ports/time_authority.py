"""Time authority port.

Services that need the current time inject this protocol instead of calling
datetime.now() directly, so status expiry and request id generation are
deterministic under test (see tests/helpers/fake_time_authority.py).
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Abstract interface for time authority."""

    @abstractmethod
    def utcnow(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
        ...
