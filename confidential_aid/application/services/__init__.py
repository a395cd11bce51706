"""Application services for Confidential Aid."""

from confidential_aid.application.services.request_lifecycle_service import (
    RequestLifecycleService,
)
from confidential_aid.application.services.status_board import StatusBoard

__all__ = ["RequestLifecycleService", "StatusBoard"]
