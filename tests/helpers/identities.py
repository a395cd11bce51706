"""Wallet identities used across tests."""

ALICE = "0xA11ce00000000000000000000000000000000001"
BOB = "0xB0b0000000000000000000000000000000000002"
