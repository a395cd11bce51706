"""Base exception classes for the Confidential Aid domain layer."""


class ConfidentialAidError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class so the
    lifecycle controller can convert them into user-visible statuses
    without catching unrelated programming errors.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
