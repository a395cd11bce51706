"""Domain models for Confidential Aid."""

from confidential_aid.domain.models.aid_request import AidRequest, RequestCategory
from confidential_aid.domain.models.session_view import (
    RequestStats,
    SessionViewState,
    compute_stats,
    compute_user_history,
    filter_requests,
)
from confidential_aid.domain.models.status_notification import (
    StatusKind,
    StatusNotification,
)

__all__ = [
    "AidRequest",
    "RequestCategory",
    "RequestStats",
    "SessionViewState",
    "StatusKind",
    "StatusNotification",
    "compute_stats",
    "compute_user_history",
    "filter_requests",
]
