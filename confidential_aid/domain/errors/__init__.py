"""Domain errors for Confidential Aid.

All exceptions inherit from ConfidentialAidError.
"""

from confidential_aid.domain.errors.request import (
    AidRequestError,
    AlreadyVerifiedError,
    DecryptionFailedError,
    EncryptionFailedError,
    InvalidRequestInputError,
    LedgerRejectedError,
    LedgerTimeoutError,
    LedgerUnreachableError,
    RecordIdCollisionError,
    RecordNotFoundError,
    UnauthenticatedError,
    is_already_verified_signal,
    is_user_rejection,
)

__all__: list[str] = [
    "AidRequestError",
    "AlreadyVerifiedError",
    "DecryptionFailedError",
    "EncryptionFailedError",
    "InvalidRequestInputError",
    "LedgerRejectedError",
    "LedgerTimeoutError",
    "LedgerUnreachableError",
    "RecordIdCollisionError",
    "RecordNotFoundError",
    "UnauthenticatedError",
    "is_already_verified_signal",
    "is_user_rejection",
]
