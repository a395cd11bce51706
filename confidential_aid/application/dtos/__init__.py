"""Result types returned by the request lifecycle service."""

from confidential_aid.application.dtos.lifecycle import (
    CreateRequestResult,
    SyncOutcome,
    VerificationOutcome,
    VerificationStage,
    VerifiedDecryption,
)

__all__ = [
    "CreateRequestResult",
    "SyncOutcome",
    "VerificationOutcome",
    "VerificationStage",
    "VerifiedDecryption",
]
