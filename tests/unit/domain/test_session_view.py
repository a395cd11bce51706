"""Unit tests for session view state and its derived views."""

from hypothesis import given
from hypothesis import strategies as st

from confidential_aid.domain.models.aid_request import AidRequest
from confidential_aid.domain.models.session_view import (
    RequestStats,
    SessionViewState,
    compute_stats,
    compute_user_history,
    filter_requests,
)
from tests.helpers import ALICE, BOB


def _record(
    record_id: str,
    *,
    title: str = "Request",
    creator: str = ALICE,
    verified: bool = False,
    revealed_value: int = 0,
) -> AidRequest:
    return AidRequest(
        id=record_id,
        title=title,
        description="Alumni Support Request",
        category=1,
        creator=creator,
        verified=verified,
        revealed_value=revealed_value,
    )


records_strategy = st.lists(
    st.builds(
        _record,
        st.uuids().map(str),
        creator=st.sampled_from([ALICE, BOB, ALICE.lower()]),
        verified=st.booleans(),
    ),
    max_size=30,
)


class TestComputeStats:
    """Tests for aggregate counts."""

    def test_empty(self) -> None:
        assert compute_stats([]) == RequestStats(total=0, verified=0, pending=0)

    def test_counts(self) -> None:
        records = [_record("a", verified=True), _record("b"), _record("c")]
        assert compute_stats(records) == RequestStats(total=3, verified=1, pending=2)

    @given(records_strategy)
    def test_pending_is_total_minus_verified(self, records: list[AidRequest]) -> None:
        stats = compute_stats(records)
        assert stats.total == len(records)
        assert stats.verified == sum(1 for r in records if r.verified)
        assert stats.pending == stats.total - stats.verified


class TestUserHistory:
    """Tests for identity-scoped history."""

    def test_case_insensitive_match(self) -> None:
        records = [_record("a", creator=ALICE.lower()), _record("b", creator=BOB)]
        history = compute_user_history(records, ALICE.upper())
        assert [r.id for r in history] == ["a"]

    def test_no_identity_means_no_history(self) -> None:
        assert compute_user_history([_record("a")], None) == ()

    @given(records_strategy)
    def test_history_is_subset_of_records(self, records: list[AidRequest]) -> None:
        history = compute_user_history(records, ALICE)
        assert all(r in records for r in history)
        assert all(r.creator.lower() == ALICE.lower() for r in history)


class TestFilterRequests:
    """Tests for the search projection."""

    def test_blank_term_returns_everything(self) -> None:
        records = [_record("a"), _record("b")]
        assert filter_requests(records, "   ") == tuple(records)

    def test_filters_by_title(self) -> None:
        records = [_record("a", title="Tuition"), _record("b", title="Rent")]
        assert [r.id for r in filter_requests(records, "rent")] == ["b"]


class TestSessionViewState:
    """Tests for SessionViewState construction."""

    def test_empty_state(self) -> None:
        state = SessionViewState.empty()
        assert state.records == ()
        assert state.stats.total == 0
        assert state.user_history == ()
        assert state.identity is None

    def test_from_snapshot_derives_fields(self) -> None:
        records = [
            _record("a", creator=ALICE, verified=True, revealed_value=10),
            _record("b", creator=BOB),
        ]
        state = SessionViewState.from_snapshot(records, ALICE)

        assert state.stats == RequestStats(total=2, verified=1, pending=1)
        assert [r.id for r in state.user_history] == ["a"]
        assert state.record_ids() == frozenset({"a", "b"})
        assert state.get("b") is records[1]
        assert state.get("missing") is None

    def test_with_identity_recomputes_history_only(self) -> None:
        state = SessionViewState.from_snapshot(
            [_record("a", creator=ALICE), _record("b", creator=BOB)], ALICE
        )
        switched = state.with_identity(BOB)

        assert switched.records == state.records
        assert switched.stats == state.stats
        assert [r.id for r in switched.user_history] == ["b"]

    @given(records_strategy, st.text(max_size=5))
    def test_search_never_changes_state(
        self, records: list[AidRequest], term: str
    ) -> None:
        state = SessionViewState.from_snapshot(records, ALICE)
        before = state
        state.search(term)
        assert state == before
