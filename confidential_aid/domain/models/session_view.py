"""Session view state for the request lifecycle controller.

The controller owns exactly one SessionViewState at a time and replaces it
wholesale; nothing in here is ever patched in place. Derived fields (stats
and user history) are recomputed from (records, identity) on every change so
cached aggregates cannot drift from the record set.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from confidential_aid.domain.models.aid_request import AidRequest


@dataclass(frozen=True)
class RequestStats:
    """Aggregate counts over a record set.

    Attributes:
        total: Number of records.
        verified: Number of verified records.
        pending: Records still awaiting verification (total - verified).
    """

    total: int = 0
    verified: int = 0
    pending: int = 0


def compute_stats(records: Iterable[AidRequest]) -> RequestStats:
    """Compute aggregate counts for a record set."""
    total = 0
    verified = 0
    for record in records:
        total += 1
        if record.verified:
            verified += 1
    return RequestStats(total=total, verified=verified, pending=total - verified)


def compute_user_history(
    records: Iterable[AidRequest], identity: str | None
) -> tuple[AidRequest, ...]:
    """Select the records created by an identity (case-insensitive).

    Args:
        records: The full record set.
        identity: Active wallet identity, or None when disconnected.

    Returns:
        Records whose creator matches identity, in snapshot order.
    """
    if not identity:
        return ()
    return tuple(record for record in records if record.is_created_by(identity))


def filter_requests(
    records: Sequence[AidRequest], term: str
) -> tuple[AidRequest, ...]:
    """Project records matching a free-text search term.

    Pure projection: never mutates records and never triggers a resync.
    A blank term returns every record.
    """
    if not term.strip():
        return tuple(records)
    return tuple(record for record in records if record.matches(term))


@dataclass(frozen=True)
class SessionViewState:
    """Snapshot of everything the presentation layer renders.

    Attributes:
        records: Full record set from the last applied sync.
        stats: Aggregate counts over records.
        user_history: Records created by identity.
        identity: Active wallet identity, None when disconnected.
    """

    records: tuple[AidRequest, ...] = field(default=())
    stats: RequestStats = field(default_factory=RequestStats)
    user_history: tuple[AidRequest, ...] = field(default=())
    identity: str | None = field(default=None)

    @classmethod
    def empty(cls, identity: str | None = None) -> SessionViewState:
        """State at session start or after disconnect."""
        return cls.from_snapshot((), identity)

    @classmethod
    def from_snapshot(
        cls, records: Iterable[AidRequest], identity: str | None
    ) -> SessionViewState:
        """Build a state with every derived field recomputed."""
        snapshot = tuple(records)
        return cls(
            records=snapshot,
            stats=compute_stats(snapshot),
            user_history=compute_user_history(snapshot, identity),
            identity=identity,
        )

    def with_identity(self, identity: str | None) -> SessionViewState:
        """Rebind the active identity, recomputing the user history."""
        return SessionViewState.from_snapshot(self.records, identity)

    def record_ids(self) -> frozenset[str]:
        """Ids present in the current snapshot."""
        return frozenset(record.id for record in self.records)

    def get(self, record_id: str) -> AidRequest | None:
        """Look up a record in the current snapshot."""
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def search(self, term: str) -> tuple[AidRequest, ...]:
        """Filtered listing of the current snapshot."""
        return filter_requests(self.records, term)
