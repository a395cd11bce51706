"""Clear-value encoding shared by the ledger and decryption stubs.

Decrypted values travel to the ledger as consecutive 32-byte big-endian
words, one per handle, in handle order.
"""

from __future__ import annotations

from collections.abc import Sequence

WORD_SIZE = 32


def encode_clear_values(values: Sequence[int]) -> bytes:
    """Encode non-negative integers as 32-byte big-endian words.

    Raises:
        ValueError: If a value is negative or does not fit in a word.
    """
    out = bytearray()
    for value in values:
        if value < 0:
            raise ValueError(f"Clear value must be non-negative, got {value}")
        try:
            out += value.to_bytes(WORD_SIZE, "big")
        except OverflowError as e:
            raise ValueError(f"Clear value does not fit in {WORD_SIZE} bytes") from e
    return bytes(out)


def decode_clear_values(payload: bytes) -> list[int]:
    """Decode a payload produced by encode_clear_values.

    Raises:
        ValueError: If the payload is not a whole number of words.
    """
    if len(payload) % WORD_SIZE:
        raise ValueError(
            f"Encoded clear values must be a multiple of {WORD_SIZE} bytes, "
            f"got {len(payload)}"
        )
    return [
        int.from_bytes(payload[i : i + WORD_SIZE], "big")
        for i in range(0, len(payload), WORD_SIZE)
    ]
