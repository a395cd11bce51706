"""Operation status notification.

The controller exposes a single status slot. Instead of owning dismiss
timers, each notification carries its own expiry instant and the
presentation layer asks whether it is still visible.

Expiry policy:
- PENDING: never expires, replaced by the next status write
- SUCCESS / ERROR: expire after a short fixed delay from issue
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum


class StatusKind(Enum):
    """Tri-state operation status."""

    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"

    def is_terminal(self) -> bool:
        """Check whether this status ends an operation."""
        return self is not StatusKind.PENDING


@dataclass(frozen=True)
class StatusNotification:
    """A status message with an optional expiry instant.

    Attributes:
        kind: Pending, success or error.
        message: Text shown to the user.
        operation: Controller operation that emitted the status.
        issued_at: When the status was written.
        expires_at: When it stops being visible, None for pending statuses.
    """

    kind: StatusKind
    message: str
    operation: str
    issued_at: datetime
    expires_at: datetime | None = field(default=None)

    @classmethod
    def issue(
        cls,
        kind: StatusKind,
        message: str,
        operation: str,
        issued_at: datetime,
        display_for: timedelta | None,
    ) -> StatusNotification:
        """Create a notification, attaching an expiry to terminal kinds.

        Args:
            kind: Status kind.
            message: Text shown to the user.
            operation: Emitting controller operation.
            issued_at: Issue instant.
            display_for: How long a terminal status stays visible.

        Returns:
            The notification.
        """
        expires_at = None
        if kind.is_terminal() and display_for is not None:
            expires_at = issued_at + display_for
        return cls(
            kind=kind,
            message=message,
            operation=operation,
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def is_visible(self, now: datetime) -> bool:
        """Check whether the notification should still be rendered."""
        return self.expires_at is None or now < self.expires_at
