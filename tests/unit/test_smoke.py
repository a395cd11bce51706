"""
Smoke tests to verify all critical dependencies are installed correctly.

These tests confirm that:
1. Python 3.11+ is installed
2. All core dependencies are importable
3. Project version is accessible

Run with: pytest tests/unit/test_smoke.py -v
"""

import sys


class TestPythonVersion:
    def test_python_311_or_higher(self) -> None:
        assert sys.version_info >= (3, 11), (
            f"Python 3.11+ required, "
            f"got {sys.version_info.major}.{sys.version_info.minor}"
        )


class TestCoreDependencies:
    """Verify the runtime stack."""

    def test_pydantic_v2(self) -> None:
        import pydantic

        major_version = int(pydantic.VERSION.split(".")[0])
        assert major_version >= 2, f"Pydantic v2 required, got {pydantic.VERSION}"

    def test_httpx_async_import(self) -> None:
        from httpx import AsyncClient, MockTransport

        assert AsyncClient is not None
        assert MockTransport is not None

    def test_structlog_binding(self) -> None:
        import structlog

        bound_logger = structlog.get_logger().bind(operation="smoke")
        assert bound_logger is not None

    def test_dotenv_import(self) -> None:
        from dotenv import load_dotenv

        assert load_dotenv is not None

    def test_hypothesis_import(self) -> None:
        from hypothesis import given, strategies

        assert given is not None
        assert strategies is not None


class TestProjectVersion:
    def test_version_format(self, project_version: str) -> None:
        parts = project_version.split(".")
        assert len(parts) >= 2, f"Version must be semver format, got {project_version}"
