"""Infrastructure layer: observability, stubs and ledger adapters."""
