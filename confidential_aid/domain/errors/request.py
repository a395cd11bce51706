"""Aid request lifecycle errors.

This module provides exception classes for failures while creating,
synchronising or verifying encrypted aid requests.

Propagation policy:
- Per-record fetch failures during a sync are absorbed by the controller.
- AlreadyVerifiedError is a benign race and maps to a success status.
- Everything else reaches the invoking protocol, which reports it and
  re-raises without retrying.
"""

from __future__ import annotations

from confidential_aid.domain.exceptions import ConfidentialAidError

ALREADY_VERIFIED_SIGNAL = "already verified"
USER_REJECTED_SIGNAL = "user rejected transaction"


class AidRequestError(ConfidentialAidError):
    """Base error for aid request lifecycle operations."""

    pass


class UnauthenticatedError(AidRequestError):
    """Raised when an operation needs a connected identity and none is bound."""

    def __init__(self, operation: str) -> None:
        """Initialize the error.

        Args:
            operation: The operation that was attempted.
        """
        self.operation = operation
        super().__init__(f"No identity connected for {operation}")


class InvalidRequestInputError(AidRequestError):
    """Raised when create input fails validation before any external call.

    Attributes:
        field: Name of the offending input field.
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize the error.

        Args:
            field: Name of the offending input field.
            message: What is wrong with it.
        """
        self.field = field
        super().__init__(f"Invalid {field}: {message}")


class EncryptionFailedError(AidRequestError):
    """Raised when the encryption service cannot initialise or encrypt."""

    pass


class LedgerRejectedError(AidRequestError):
    """Raised when a ledger write is declined or reverted.

    Attributes:
        reason: Rejection reason reported by the wallet or contract.
        user_declined: True when the user refused to authorise the write.
    """

    def __init__(self, reason: str, *, user_declined: bool = False) -> None:
        """Initialize the error.

        Args:
            reason: Rejection reason reported by the wallet or contract.
            user_declined: True when the user refused to authorise the write.
        """
        self.reason = reason
        self.user_declined = user_declined
        super().__init__(f"Ledger rejected write: {reason}")


class RecordIdCollisionError(LedgerRejectedError):
    """Raised when the ledger already holds a record with the submitted id."""

    def __init__(self, record_id: str) -> None:
        """Initialize the error.

        Args:
            record_id: The id that already exists on the ledger.
        """
        self.record_id = record_id
        super().__init__(f"record id {record_id} already exists")


class LedgerTimeoutError(AidRequestError):
    """Raised when a submitted write is not included in time.

    Attributes:
        tx_ref: Reference of the transaction that was being awaited.
        timeout_seconds: How long the controller waited.
    """

    def __init__(self, tx_ref: str, timeout_seconds: float) -> None:
        """Initialize the error.

        Args:
            tx_ref: Reference of the transaction that was being awaited.
            timeout_seconds: How long the controller waited.
        """
        self.tx_ref = tx_ref
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Transaction {tx_ref} not confirmed within {timeout_seconds:g}s"
        )


class LedgerUnreachableError(AidRequestError):
    """Raised when a ledger read path fails."""

    pass


class RecordNotFoundError(AidRequestError):
    """Raised when the ledger has no record with the requested id."""

    def __init__(self, record_id: str) -> None:
        """Initialize the error.

        Args:
            record_id: The id that was not found.
        """
        self.record_id = record_id
        super().__init__(f"Aid request not found: {record_id}")


class AlreadyVerifiedError(AidRequestError):
    """Raised by the ledger when a record was verified by a concurrent caller."""

    def __init__(self, record_id: str) -> None:
        """Initialize the error.

        Args:
            record_id: The record that is already verified.
        """
        self.record_id = record_id
        super().__init__(f"Data already verified: {record_id}")


class DecryptionFailedError(AidRequestError):
    """Raised when the decrypt-and-prove exchange does not complete."""

    pass


def is_already_verified_signal(error: BaseException) -> bool:
    """Check whether an error means "the record is already verified".

    The decryption service may wrap the ledger's rejection, so the whole
    cause chain is inspected, falling back to the rejection message.

    Args:
        error: The exception raised during verification.

    Returns:
        True if the error or any of its causes carries the signal.
    """
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, AlreadyVerifiedError):
            return True
        if ALREADY_VERIFIED_SIGNAL in str(current).lower():
            return True
        current = current.__cause__ or current.__context__
    return False


def is_user_rejection(error: BaseException) -> bool:
    """Check whether an error is the wallet reporting a declined signature.

    Args:
        error: The exception raised during a ledger write.

    Returns:
        True if the user declined to authorise the write.
    """
    if isinstance(error, LedgerRejectedError):
        return error.user_declined
    return USER_REJECTED_SIGNAL in str(error).lower()
