"""System clock implementation of TimeAuthorityProtocol."""

from datetime import datetime, timezone

from confidential_aid.application.ports.time_authority import TimeAuthorityProtocol


class SystemTimeAuthority(TimeAuthorityProtocol):
    """Time authority backed by the host clock. Always returns UTC."""

    def utcnow(self) -> datetime:
        return datetime.now(timezone.utc)
