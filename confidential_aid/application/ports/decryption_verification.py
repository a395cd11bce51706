"""Decryption-verification service port.

The service decrypts one or more ciphertext handles and produces a proof of
correct decryption. Proof submission is bound to proof generation: the
service itself invokes the caller's submit callback with the encoded
cleartexts and the proof, inside the same call.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

SubmitProof = Callable[[bytes, bytes], Awaitable[None]]


@dataclass(frozen=True)
class DecryptionResult:
    """Outcome of a decrypt-and-prove exchange.

    Attributes:
        clear_values: Cleartext per ciphertext handle.
        proof: The decryption proof that was handed to the submit callback.
    """

    clear_values: dict[str, int] = field(default_factory=dict)
    proof: bytes = b""


class DecryptionVerificationProtocol(Protocol):
    """Protocol for the decrypt-and-prove service."""

    async def verify_decryption(
        self,
        handles: Sequence[str],
        target_context: str,
        submit: SubmitProof,
    ) -> DecryptionResult:
        """Decrypt handles and submit the proof through the callback.

        Args:
            handles: Ciphertext handles to decrypt.
            target_context: Contract address the ciphertexts are bound to.
            submit: Callback receiving (encoded_clear_values, proof); any
                exception it raises propagates out of this call.

        Returns:
            Cleartext per handle and the proof that was submitted.
        """
        ...
