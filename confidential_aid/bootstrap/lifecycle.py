"""Bootstrap wiring for request lifecycle dependencies."""

from __future__ import annotations

from structlog import get_logger

from confidential_aid.application.ports.decryption_verification import (
    DecryptionVerificationProtocol,
)
from confidential_aid.application.ports.encryption_service import (
    EncryptionServiceProtocol,
)
from confidential_aid.application.ports.ledger_gateway import LedgerGatewayProtocol
from confidential_aid.application.ports.time_authority import TimeAuthorityProtocol
from confidential_aid.application.services.request_lifecycle_service import (
    RequestLifecycleService,
)
from confidential_aid.config.lifecycle_config import LedgerHttpConfig, LifecycleConfig
from confidential_aid.infrastructure.adapters.system_time_authority import (
    SystemTimeAuthority,
)
from confidential_aid.infrastructure.stubs.decryption_verification_stub import (
    DecryptionVerificationStub,
)
from confidential_aid.infrastructure.stubs.encryption_service_stub import (
    EncryptionServiceStub,
)
from confidential_aid.infrastructure.stubs.ledger_gateway_stub import (
    LedgerGatewayStub,
)

logger = get_logger()

_ledger_gateway: LedgerGatewayProtocol | None = None
_encryption_service: EncryptionServiceProtocol | None = None
_decryption_service: DecryptionVerificationProtocol | None = None
_time_authority: TimeAuthorityProtocol | None = None
_lifecycle_config: LifecycleConfig | None = None
_request_lifecycle_service: RequestLifecycleService | None = None


def get_time_authority() -> TimeAuthorityProtocol:
    global _time_authority
    if _time_authority is None:
        _time_authority = SystemTimeAuthority()
    return _time_authority


def get_lifecycle_config() -> LifecycleConfig:
    """Get lifecycle configuration, read from the environment once."""
    global _lifecycle_config
    if _lifecycle_config is None:
        _lifecycle_config = LifecycleConfig.from_environment()
    return _lifecycle_config


def get_ledger_gateway() -> LedgerGatewayProtocol:
    """Get ledger gateway instance.

    Returns the HTTP relay gateway if AID_LEDGER_URL is configured,
    otherwise falls back to the in-memory stub.
    """
    global _ledger_gateway
    if _ledger_gateway is None:
        http_config = LedgerHttpConfig.from_environment()
        if http_config.base_url:
            from confidential_aid.infrastructure.adapters.ledger import (
                HttpLedgerGateway,
            )

            _ledger_gateway = HttpLedgerGateway(http_config)
            logger.info(
                "ledger_gateway_initialized",
                gateway_type="http",
                base_url=http_config.base_url,
            )
        else:
            logger.warning(
                "ledger_gateway_initialized",
                gateway_type="stub",
                message="AID_LEDGER_URL not set, using in-memory ledger",
            )
            _ledger_gateway = LedgerGatewayStub(time_authority=get_time_authority())
    return _ledger_gateway


def get_encryption_service() -> EncryptionServiceProtocol:
    global _encryption_service
    if _encryption_service is None:
        _encryption_service = EncryptionServiceStub()
    return _encryption_service


def get_decryption_service() -> DecryptionVerificationProtocol:
    global _decryption_service
    if _decryption_service is None:
        encryption = get_encryption_service()
        if not isinstance(encryption, EncryptionServiceStub):
            raise RuntimeError(
                "No decryption-verification service is wired for this encryption service"
            )
        _decryption_service = DecryptionVerificationStub(encryption)
    return _decryption_service


def get_request_lifecycle_service() -> RequestLifecycleService:
    """Get the request lifecycle service singleton."""
    global _request_lifecycle_service
    if _request_lifecycle_service is None:
        _request_lifecycle_service = RequestLifecycleService(
            ledger=get_ledger_gateway(),
            encryption=get_encryption_service(),
            decryption=get_decryption_service(),
            time_authority=get_time_authority(),
            config=get_lifecycle_config(),
        )
    return _request_lifecycle_service


def set_ledger_gateway(gateway: LedgerGatewayProtocol) -> None:
    """Set custom ledger gateway (for testing)."""
    global _ledger_gateway
    _ledger_gateway = gateway


def set_time_authority(time_authority: TimeAuthorityProtocol) -> None:
    """Set custom time authority (for testing)."""
    global _time_authority
    _time_authority = time_authority


def reset_lifecycle_dependencies() -> None:
    """Reset all singletons (for testing)."""
    global _ledger_gateway, _encryption_service, _decryption_service
    global _time_authority, _lifecycle_config, _request_lifecycle_service
    _ledger_gateway = None
    _encryption_service = None
    _decryption_service = None
    _time_authority = None
    _lifecycle_config = None
    _request_lifecycle_service = None
