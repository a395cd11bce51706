"""Unit tests for lifecycle configuration."""

import os
from unittest.mock import patch

import pytest

from confidential_aid.config.lifecycle_config import (
    DEFAULT_LIFECYCLE_CONFIG,
    LedgerHttpConfig,
    LifecycleConfig,
)


class TestLifecycleConfig:
    """Tests for LifecycleConfig defaults and validation."""

    def test_defaults(self) -> None:
        config = DEFAULT_LIFECYCLE_CONFIG
        assert config.success_status_seconds == 2.0
        assert config.error_status_seconds == 3.0
        assert config.max_id_attempts == 5
        assert config.request_id_prefix == "request-"
        assert config.purpose_label == "Alumni Support Request"

    @pytest.mark.parametrize(
        ("field", "value", "message"),
        [
            ("success_status_seconds", 0, "must be positive"),
            ("error_status_seconds", -1, "must be positive"),
            ("confirmation_timeout_seconds", 0, "must be positive"),
            ("max_id_attempts", 0, "must be at least 1"),
            ("request_id_prefix", "", "must not be empty"),
        ],
    )
    def test_validation(self, field: str, value: object, message: str) -> None:
        with pytest.raises(ValueError, match=message):
            LifecycleConfig(**{field: value})  # type: ignore[arg-type]

    def test_from_environment(self) -> None:
        env = {
            "AID_SUCCESS_STATUS_SECONDS": "1.5",
            "AID_CONFIRMATION_TIMEOUT_SECONDS": "30",
            "AID_MAX_ID_ATTEMPTS": "9",
            "AID_PURPOSE_LABEL": "Scholarship Fund",
        }
        with patch.dict(os.environ, env):
            config = LifecycleConfig.from_environment()

        assert config.success_status_seconds == 1.5
        assert config.confirmation_timeout_seconds == 30.0
        assert config.max_id_attempts == 9
        assert config.purpose_label == "Scholarship Fund"
        assert config.error_status_seconds == 3.0

    def test_invalid_environment_values_fall_back(self) -> None:
        with patch.dict(
            os.environ, {"AID_MAX_ID_ATTEMPTS": "many", "AID_REQUEST_ID_PREFIX": "  "}
        ):
            config = LifecycleConfig.from_environment()

        assert config.max_id_attempts == 5
        assert config.request_id_prefix == "request-"


class TestLedgerHttpConfig:
    def test_unset_url_means_in_memory(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert LedgerHttpConfig.from_environment().base_url is None

    def test_from_environment(self) -> None:
        with patch.dict(
            os.environ,
            {"AID_LEDGER_URL": "http://relay:8545", "AID_LEDGER_TIMEOUT_SECONDS": "3"},
        ):
            config = LedgerHttpConfig.from_environment()

        assert config.base_url == "http://relay:8545"
        assert config.timeout_seconds == 3.0

    def test_validation(self) -> None:
        with pytest.raises(ValueError, match="must be positive"):
            LedgerHttpConfig(poll_interval_seconds=0)
