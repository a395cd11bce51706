"""Production adapters for application ports."""

from confidential_aid.infrastructure.adapters.ledger import (
    HttpLedgerGateway,
    HttpLedgerTransaction,
)
from confidential_aid.infrastructure.adapters.system_time_authority import (
    SystemTimeAuthority,
)

__all__ = ["HttpLedgerGateway", "HttpLedgerTransaction", "SystemTimeAuthority"]
