"""Ledger relay HTTP adapter."""

from confidential_aid.infrastructure.adapters.ledger.http_ledger_gateway import (
    HttpLedgerGateway,
    HttpLedgerTransaction,
)

__all__ = ["HttpLedgerGateway", "HttpLedgerTransaction"]
