"""Request lifecycle configuration.

This module defines tunables for the lifecycle controller and the HTTP
ledger gateway, with environment variable overrides.

Environment Variables (Lifecycle):
- AID_SUCCESS_STATUS_SECONDS: How long success statuses stay visible (default: 2.0)
- AID_ERROR_STATUS_SECONDS: How long error statuses stay visible (default: 3.0)
- AID_CONFIRMATION_TIMEOUT_SECONDS: Max wait for block inclusion (default: 120.0)
- AID_MAX_ID_ATTEMPTS: Id generation attempts on collision (default: 5)
- AID_REQUEST_ID_PREFIX: Prefix of generated record ids (default: "request-")
- AID_PURPOSE_LABEL: Description stored with every record (default: "Alumni Support Request")

Environment Variables (Ledger HTTP gateway):
- AID_LEDGER_URL: Base URL of the ledger relay (unset: in-memory ledger)
- AID_LEDGER_TIMEOUT_SECONDS: Per-request HTTP timeout (default: 10.0)
- AID_LEDGER_POLL_INTERVAL_SECONDS: Receipt polling interval (default: 1.0)
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed float value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_str_env(key: str, default: str) -> str:
    """Get a non-blank string environment variable with default."""
    value = os.environ.get(key)
    if value is None or not value.strip():
        return default
    return value


@dataclass(frozen=True)
class LifecycleConfig:
    """Configuration for the request lifecycle controller.

    Attributes:
        success_status_seconds: Visibility of success statuses.
        error_status_seconds: Visibility of error statuses.
        confirmation_timeout_seconds: Max wait for a write to be included.
        max_id_attempts: Id generation attempts before giving up.
        request_id_prefix: Prefix of generated record ids.
        purpose_label: Description written with every new record.
    """

    success_status_seconds: float = 2.0
    error_status_seconds: float = 3.0
    confirmation_timeout_seconds: float = 120.0
    max_id_attempts: int = 5
    request_id_prefix: str = "request-"
    purpose_label: str = "Alumni Support Request"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.success_status_seconds <= 0:
            raise ValueError(
                f"success_status_seconds must be positive, got {self.success_status_seconds}"
            )
        if self.error_status_seconds <= 0:
            raise ValueError(
                f"error_status_seconds must be positive, got {self.error_status_seconds}"
            )
        if self.confirmation_timeout_seconds <= 0:
            raise ValueError(
                "confirmation_timeout_seconds must be positive, "
                f"got {self.confirmation_timeout_seconds}"
            )
        if self.max_id_attempts < 1:
            raise ValueError(
                f"max_id_attempts must be at least 1, got {self.max_id_attempts}"
            )
        if not self.request_id_prefix:
            raise ValueError("request_id_prefix must not be empty")

    @classmethod
    def from_environment(cls) -> "LifecycleConfig":
        """Create config from environment variables with defaults.

        Returns:
            LifecycleConfig with values from environment or defaults.
        """
        return cls(
            success_status_seconds=_get_float_env("AID_SUCCESS_STATUS_SECONDS", 2.0),
            error_status_seconds=_get_float_env("AID_ERROR_STATUS_SECONDS", 3.0),
            confirmation_timeout_seconds=_get_float_env(
                "AID_CONFIRMATION_TIMEOUT_SECONDS", 120.0
            ),
            max_id_attempts=_get_int_env("AID_MAX_ID_ATTEMPTS", 5),
            request_id_prefix=_get_str_env("AID_REQUEST_ID_PREFIX", "request-"),
            purpose_label=_get_str_env("AID_PURPOSE_LABEL", "Alumni Support Request"),
        )


@dataclass(frozen=True)
class LedgerHttpConfig:
    """Configuration for the HTTP ledger gateway.

    Attributes:
        base_url: Base URL of the ledger relay, None for the in-memory ledger.
        timeout_seconds: Per-request HTTP timeout.
        poll_interval_seconds: Delay between transaction receipt polls.
    """

    base_url: str | None = None
    timeout_seconds: float = 10.0
    poll_interval_seconds: float = 1.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got {self.timeout_seconds}"
            )
        if self.poll_interval_seconds <= 0:
            raise ValueError(
                f"poll_interval_seconds must be positive, got {self.poll_interval_seconds}"
            )

    @classmethod
    def from_environment(cls) -> "LedgerHttpConfig":
        """Create config from environment variables with defaults."""
        base_url = os.environ.get("AID_LEDGER_URL") or None
        return cls(
            base_url=base_url,
            timeout_seconds=_get_float_env("AID_LEDGER_TIMEOUT_SECONDS", 10.0),
            poll_interval_seconds=_get_float_env(
                "AID_LEDGER_POLL_INTERVAL_SECONDS", 1.0
            ),
        )


# Pre-defined configurations

# Default production config
DEFAULT_LIFECYCLE_CONFIG = LifecycleConfig()

# Testing config with short timeouts for unit tests
TEST_LIFECYCLE_CONFIG = LifecycleConfig(
    success_status_seconds=2.0,
    error_status_seconds=3.0,
    confirmation_timeout_seconds=0.5,
    max_id_attempts=3,
)

DEFAULT_LEDGER_HTTP_CONFIG = LedgerHttpConfig()
