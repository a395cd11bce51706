"""Encryption service stub.

Produces opaque ciphertexts and remembers the plaintext behind each handle so
DecryptionVerificationStub can play the decryption side. No real encryption
happens here.
"""

from __future__ import annotations

import hashlib
import itertools

from confidential_aid.application.ports.encryption_service import EncryptedInput


class EncryptionServiceStub:
    """In-memory stub implementation of EncryptionServiceProtocol.

    Attributes:
        initialize_calls: Identities initialize() was called with.
        encrypt_calls: (target_context, requester, plaintext) per encrypt().
    """

    def __init__(
        self,
        *,
        fail_initialize: bool = False,
        fail_encrypt: bool = False,
    ) -> None:
        self._fail_initialize = fail_initialize
        self._fail_encrypt = fail_encrypt
        self._initialized = False
        self._plaintexts: dict[str, int] = {}
        self._nonce = itertools.count(1)
        self.initialize_calls: list[str] = []
        self.encrypt_calls: list[tuple[str, str, int]] = []

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    async def initialize(self, identity: str) -> None:
        self.initialize_calls.append(identity)
        if self._fail_initialize:
            raise RuntimeError("encryption runtime failed to load")
        self._initialized = True

    async def encrypt(
        self, target_context: str, requester: str, plaintext: int
    ) -> EncryptedInput:
        self.encrypt_calls.append((target_context, requester, plaintext))
        if not self._initialized:
            raise RuntimeError("encryption service is not initialized")
        if self._fail_encrypt:
            raise RuntimeError("input proof generation failed")

        material = f"{target_context}|{requester}|{plaintext}|{next(self._nonce)}"
        ciphertext = hashlib.sha256(material.encode()).digest()
        proof = hashlib.sha256(b"input-proof" + ciphertext).digest()
        self._plaintexts["0x" + ciphertext.hex()] = plaintext
        return EncryptedInput(ciphertext=ciphertext, proof=proof)

    def plaintext_for(self, handle: str) -> int | None:
        return self._plaintexts.get(handle)

    def set_fail_initialize(self, fail: bool) -> None:
        self._fail_initialize = fail

    def set_fail_encrypt(self, fail: bool) -> None:
        self._fail_encrypt = fail
