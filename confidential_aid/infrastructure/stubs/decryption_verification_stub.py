"""Decryption-verification service stub.

Looks up the plaintext behind each handle in an EncryptionServiceStub,
builds a proof, and hands both to the caller's submit callback, the same
call shape as the real decrypt-and-prove SDK.
"""

from __future__ import annotations

import asyncio
import hashlib
from collections.abc import Sequence

from confidential_aid.application.ports.decryption_verification import (
    DecryptionResult,
    SubmitProof,
)
from confidential_aid.infrastructure.codec import encode_clear_values
from confidential_aid.infrastructure.stubs.encryption_service_stub import (
    EncryptionServiceStub,
)


class DecryptionVerificationStub:
    """In-memory stub implementation of DecryptionVerificationProtocol.

    Attributes:
        calls: Handle lists verify_decryption() was called with.
        gate: When set, every call waits on it before submitting.
    """

    def __init__(
        self,
        encryption: EncryptionServiceStub,
        *,
        gate: asyncio.Event | None = None,
        skip_submit: bool = False,
        wrap_submit_errors: bool = False,
        fail_with: Exception | None = None,
    ) -> None:
        self._encryption = encryption
        self.gate = gate
        self._skip_submit = skip_submit
        self._wrap_submit_errors = wrap_submit_errors
        self._fail_with = fail_with
        self.calls: list[list[str]] = []

    async def verify_decryption(
        self,
        handles: Sequence[str],
        target_context: str,
        submit: SubmitProof,
    ) -> DecryptionResult:
        self.calls.append(list(handles))
        if self._fail_with is not None:
            raise self._fail_with

        values: list[int] = []
        for handle in handles:
            value = self._encryption.plaintext_for(handle)
            if value is None:
                raise RuntimeError(f"unknown ciphertext handle {handle[:18]}")
            values.append(value)

        encoded = encode_clear_values(values)
        proof = hashlib.sha256(target_context.encode() + encoded).digest()

        if self.gate is not None:
            await self.gate.wait()

        if not self._skip_submit:
            try:
                await submit(encoded, proof)
            except Exception as e:
                if self._wrap_submit_errors:
                    raise RuntimeError("decryption proof submission failed") from e
                raise

        return DecryptionResult(clear_values=dict(zip(handles, values)), proof=proof)
