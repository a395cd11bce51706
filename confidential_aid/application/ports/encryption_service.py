"""Encryption service port.

The encryption service turns a plaintext amount into ciphertext plus a
correctness proof bound to a target context and a requester. It must be
initialised once per session after a wallet connects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class EncryptedInput:
    """Ciphertext and its correctness proof.

    Attributes:
        ciphertext: Encrypted amount, opaque to the controller.
        proof: Proof that the ciphertext is well formed.
    """

    ciphertext: bytes
    proof: bytes


class EncryptionServiceProtocol(Protocol):
    """Protocol for client-side encryption of amounts."""

    @property
    def is_initialized(self) -> bool:
        """Whether initialize() has completed for the current session."""
        ...

    async def initialize(self, identity: str) -> None:
        """Prepare the service for a connected identity.

        Raises:
            Exception: Any failure; the controller reports it as
                EncryptionFailedError.
        """
        ...

    async def encrypt(
        self, target_context: str, requester: str, plaintext: int
    ) -> EncryptedInput:
        """Encrypt a plaintext integer for a target context.

        Args:
            target_context: Contract address the ciphertext is bound to.
            requester: Identity that will submit the ciphertext.
            plaintext: Amount to encrypt.

        Returns:
            Ciphertext and correctness proof.
        """
        ...
