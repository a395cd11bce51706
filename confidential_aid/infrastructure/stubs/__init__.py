"""Infrastructure stubs for development and testing.

Available stubs:
- LedgerGatewayStub: In-memory ledger with fault injection and gates
- EncryptionServiceStub: Opaque ciphertexts with a plaintext registry
- DecryptionVerificationStub: Decrypt-and-prove that calls the submit callback

WARNING: These stubs are NOT for production use.
Production adapters are in confidential_aid/infrastructure/adapters/.
"""

from confidential_aid.infrastructure.stubs.decryption_verification_stub import (
    DecryptionVerificationStub,
)
from confidential_aid.infrastructure.stubs.encryption_service_stub import (
    EncryptionServiceStub,
)
from confidential_aid.infrastructure.stubs.ledger_gateway_stub import (
    DEFAULT_TARGET_CONTEXT,
    LedgerGatewayStub,
    StoredRecord,
    StubTransaction,
)

__all__: list[str] = [
    "DEFAULT_TARGET_CONTEXT",
    "DecryptionVerificationStub",
    "EncryptionServiceStub",
    "LedgerGatewayStub",
    "StoredRecord",
    "StubTransaction",
]
