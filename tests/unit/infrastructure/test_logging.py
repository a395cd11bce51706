"""Unit tests for structured logging configuration.

Tests the structlog configuration and logging output format.
"""

import json
import os
from unittest.mock import patch

import pytest
import structlog

from confidential_aid.infrastructure.observability.correlation import (
    correlation_scope,
)
from confidential_aid.infrastructure.observability.logging import (
    _get_log_level,
    configure_structlog,
    get_logger_for_service,
)


def _has_processor(kind: type) -> bool:
    processors = structlog.get_config().get("processors", [])
    return any(isinstance(p, kind) for p in processors)


@pytest.fixture(autouse=True)
def restore_structlog():
    """Put structlog back to its defaults after each test."""
    yield
    structlog.reset_defaults()


class TestConfigureStructlog:
    """Tests for configure_structlog function."""

    def test_production_renders_json(self) -> None:
        configure_structlog(environment="production")
        assert _has_processor(structlog.processors.JSONRenderer)

    def test_development_renders_console(self) -> None:
        configure_structlog(environment="development")
        assert _has_processor(structlog.dev.ConsoleRenderer)

    def test_defaults_to_production(self) -> None:
        configure_structlog()
        assert _has_processor(structlog.processors.JSONRenderer)

    def test_log_level_from_environment(self) -> None:
        with patch.dict(os.environ, {"LOG_LEVEL": "warning"}):
            assert _get_log_level() == 30

    def test_unknown_log_level_falls_back_to_info(self) -> None:
        with patch.dict(os.environ, {"LOG_LEVEL": "chatty"}):
            assert _get_log_level() == 20


class TestLogOutput:
    """Tests for actual log output format."""

    def test_json_output_structure(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_structlog(environment="production")

        with correlation_scope("sync-correlation"):
            structlog.get_logger().info("sync_applied", record_count=3)

        log_entry = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert log_entry["event"] == "sync_applied"
        assert log_entry["level"] == "info"
        assert "T" in log_entry["timestamp"]
        assert log_entry["correlation_id"] == "sync-correlation"
        assert log_entry["record_count"] == 3

    def test_service_logger_binds_names(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        configure_structlog(environment="production")

        get_logger_for_service("RequestLifecycleService").info("create_started")

        log_entry = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert log_entry["service"] == "RequestLifecycleService"
        assert log_entry["component"] == "lifecycle"
