"""
Pytest configuration and shared fixtures for Confidential Aid tests.

Testing Standards:
- All async tests use pytest.mark.asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async function mocking
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

import pytest

from confidential_aid.application.services.request_lifecycle_service import (
    RequestLifecycleService,
)
from confidential_aid.config.lifecycle_config import TEST_LIFECYCLE_CONFIG
from confidential_aid.infrastructure.stubs import (
    DecryptionVerificationStub,
    EncryptionServiceStub,
    LedgerGatewayStub,
)
from tests.helpers import ALICE, FakeTimeAuthority


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from confidential_aid import __version__

    return __version__


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Provide a frozen clock at 2026-01-01T00:00:00 UTC."""
    return FakeTimeAuthority()


@pytest.fixture
def ledger(fake_time_authority: FakeTimeAuthority) -> LedgerGatewayStub:
    """Provide an empty in-memory ledger."""
    return LedgerGatewayStub(time_authority=fake_time_authority)


@pytest.fixture
def encryption() -> EncryptionServiceStub:
    """Provide an encryption service stub."""
    return EncryptionServiceStub()


@pytest.fixture
def decryption(encryption: EncryptionServiceStub) -> DecryptionVerificationStub:
    """Provide a decryption-verification stub paired with the encryption stub."""
    return DecryptionVerificationStub(encryption)


@pytest.fixture
def service(
    ledger: LedgerGatewayStub,
    encryption: EncryptionServiceStub,
    decryption: DecryptionVerificationStub,
    fake_time_authority: FakeTimeAuthority,
) -> RequestLifecycleService:
    """Provide a lifecycle service wired to the in-memory stack."""
    return RequestLifecycleService(
        ledger=ledger,
        encryption=encryption,
        decryption=decryption,
        time_authority=fake_time_authority,
        config=TEST_LIFECYCLE_CONFIG,
    )


@pytest.fixture
async def connected_service(
    service: RequestLifecycleService,
) -> RequestLifecycleService:
    """Provide a lifecycle service connected as ALICE."""
    await service.connect(ALICE)
    return service
