"""
Confidential Aid - encrypted request lifecycle for a closed community ledger.

Members submit aid requests whose amount is encrypted client-side and stored
as ciphertext on a public ledger. Amounts are only revealed through an
explicit decrypt-and-verify step whose proof is consumed by the ledger.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
