"""Application ports: interfaces the lifecycle controller depends on.

Implementations live in confidential_aid/infrastructure/ (stubs for tests and
local runs, adapters for real backends).
"""

from confidential_aid.application.ports.decryption_verification import (
    DecryptionResult,
    DecryptionVerificationProtocol,
    SubmitProof,
)
from confidential_aid.application.ports.encryption_service import (
    EncryptedInput,
    EncryptionServiceProtocol,
)
from confidential_aid.application.ports.ledger_gateway import (
    LedgerGatewayProtocol,
    LedgerTransaction,
)
from confidential_aid.application.ports.time_authority import TimeAuthorityProtocol

__all__: list[str] = [
    "DecryptionResult",
    "DecryptionVerificationProtocol",
    "EncryptedInput",
    "EncryptionServiceProtocol",
    "LedgerGatewayProtocol",
    "LedgerTransaction",
    "SubmitProof",
    "TimeAuthorityProtocol",
]
