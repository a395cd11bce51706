"""Single-slot operation status board.

Only the most recently written status is kept; a new write replaces the
previous one regardless of kind. Terminal statuses carry their own expiry so
the presentation layer can hide them without the board owning timers.
"""

from __future__ import annotations

from datetime import timedelta

from confidential_aid.application.ports.time_authority import TimeAuthorityProtocol
from confidential_aid.application.services.base import LoggingMixin
from confidential_aid.config.lifecycle_config import LifecycleConfig
from confidential_aid.domain.models.status_notification import (
    StatusKind,
    StatusNotification,
)


class StatusBoard(LoggingMixin):
    """Holds the one visible operation status.

    Attributes:
        _time: Clock used for issue and expiry instants.
        _durations: Display duration per terminal kind.
        _slot: The last written notification, if any.
    """

    def __init__(
        self, time_authority: TimeAuthorityProtocol, config: LifecycleConfig
    ) -> None:
        self._time = time_authority
        self._durations = {
            StatusKind.SUCCESS: timedelta(seconds=config.success_status_seconds),
            StatusKind.ERROR: timedelta(seconds=config.error_status_seconds),
        }
        self._slot: StatusNotification | None = None
        self._init_logger(component="status")

    def pending(self, operation: str, message: str) -> StatusNotification:
        return self._write(StatusKind.PENDING, operation, message)

    def success(self, operation: str, message: str) -> StatusNotification:
        return self._write(StatusKind.SUCCESS, operation, message)

    def error(self, operation: str, message: str) -> StatusNotification:
        return self._write(StatusKind.ERROR, operation, message)

    def current(self) -> StatusNotification | None:
        """The visible notification, or None if empty or expired."""
        slot = self._slot
        if slot is None or not slot.is_visible(self._time.utcnow()):
            return None
        return slot

    @property
    def last(self) -> StatusNotification | None:
        """The last written notification, ignoring expiry."""
        return self._slot

    def clear(self) -> None:
        self._slot = None

    def _write(
        self, kind: StatusKind, operation: str, message: str
    ) -> StatusNotification:
        notification = StatusNotification.issue(
            kind=kind,
            message=message,
            operation=operation,
            issued_at=self._time.utcnow(),
            display_for=self._durations.get(kind),
        )
        previous = self._slot
        self._slot = notification
        self._log.debug(
            "status_written",
            status=kind.value,
            status_message=message,
            status_operation=operation,
            replaced=previous.operation if previous is not None else None,
        )
        return notification
