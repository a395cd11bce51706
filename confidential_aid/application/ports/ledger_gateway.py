"""Ledger gateway port.

This module defines the contract for reading and writing aid request
records on the authoritative ledger.

Error contract (implementations MUST translate their transport errors):
- Read failures raise LedgerUnreachableError
- Unknown record ids raise RecordNotFoundError
- Declined or reverted writes raise LedgerRejectedError
  (RecordIdCollisionError for duplicate ids, AlreadyVerifiedError for a
  second verification of the same record)

Writes return a LedgerTransaction as soon as they are broadcast; callers
must await wait() to know the write was included in a block.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol


class LedgerTransaction(Protocol):
    """A broadcast ledger write awaiting inclusion.

    Attributes:
        tx_ref: Opaque transaction reference for logging.
    """

    tx_ref: str

    async def wait(self) -> None:
        """Suspend until the write is included in a block.

        Raises:
            LedgerRejectedError: If the write reverted.
        """
        ...


class LedgerGatewayProtocol(Protocol):
    """Protocol for ledger read and write operations.

    Read surface:
        list_record_ids, get_record, get_ciphertext_handle, is_available,
        get_target_context
    Write surface:
        create_record, submit_verification
    """

    async def list_record_ids(self) -> list[str]:
        """Enumerate every record id on the ledger.

        Returns:
            Record ids in ledger order.

        Raises:
            LedgerUnreachableError: If the ledger cannot be read.
        """
        ...

    async def get_record(self, record_id: str) -> Mapping[str, Any]:
        """Fetch the public fields of one record.

        Returns a mapping with keys title, description, category,
        secondary_value, created_at, creator, verified and revealed_value.

        Raises:
            RecordNotFoundError: If no such record exists.
            LedgerUnreachableError: If the ledger cannot be read.
        """
        ...

    async def get_ciphertext_handle(self, record_id: str) -> str:
        """Fetch the opaque ciphertext handle for a record.

        Raises:
            RecordNotFoundError: If no such record exists.
            LedgerUnreachableError: If the ledger cannot be read.
        """
        ...

    async def is_available(self) -> bool:
        """Health probe for the ledger contract.

        Raises:
            LedgerUnreachableError: If the probe itself cannot be executed.
        """
        ...

    async def get_target_context(self) -> str:
        """Address of the contract that ciphertexts are bound to.

        Raises:
            LedgerUnreachableError: If the ledger cannot be read.
        """
        ...

    async def create_record(
        self,
        record_id: str,
        title: str,
        ciphertext: bytes,
        proof: bytes,
        category: int,
        secondary_value: int,
        purpose_label: str,
        sender: str,
    ) -> LedgerTransaction:
        """Broadcast a record creation.

        Args:
            record_id: Creator-generated id, also the ciphertext locator.
            title: Public title.
            ciphertext: Encrypted amount.
            proof: Encryption correctness proof.
            category: Public category selector.
            secondary_value: Public secondary slot.
            purpose_label: Fixed description stored with the record.
            sender: Identity authorising the write.

        Raises:
            LedgerRejectedError: If the write is declined before broadcast.
        """
        ...

    async def submit_verification(
        self,
        record_id: str,
        encoded_clear_values: bytes,
        proof: bytes,
        sender: str,
    ) -> LedgerTransaction:
        """Broadcast a decryption proof for a record.

        Raises:
            AlreadyVerifiedError: If the record is already verified.
            LedgerRejectedError: If the write is declined before broadcast.
        """
        ...
