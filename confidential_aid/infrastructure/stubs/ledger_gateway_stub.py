"""In-memory ledger gateway stub.

This module provides an in-memory implementation of LedgerGatewayProtocol
for development and testing. It behaves like the aid request contract:
ids are unique, verified is monotonic, and a second verification of the
same record is rejected with "Data already verified".

Test controls:
- fail_enumeration / fail_record: inject read failures
- add_enumeration_gate: park the next list_record_ids() after it has read
  the ids, so tests can order concurrent syncs
- reject_next_create / reject_next_verification: inject write rejections
- pause_confirmations: broadcast writes never reach inclusion until
  resume_confirmations; awaiting_confirmation counts them
"""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, field
from typing import Any

from confidential_aid.application.ports.time_authority import TimeAuthorityProtocol
from confidential_aid.domain.errors import (
    AlreadyVerifiedError,
    LedgerRejectedError,
    LedgerUnreachableError,
    RecordIdCollisionError,
    RecordNotFoundError,
)
from confidential_aid.infrastructure.codec import decode_clear_values

DEFAULT_TARGET_CONTEXT = "0x5FbDB2315678afecb367f032d93F642f64180aa3"


@dataclass
class StoredRecord:
    """A record as held by the in-memory ledger."""

    record_id: str
    title: str
    description: str
    category: int
    secondary_value: int
    creator: str
    created_at: int
    ciphertext: bytes
    proof: bytes
    verified: bool = False
    revealed_value: int = 0

    def public_fields(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "secondary_value": self.secondary_value,
            "created_at": self.created_at,
            "creator": self.creator,
            "verified": self.verified,
            "revealed_value": self.revealed_value,
        }


@dataclass
class StubTransaction:
    """A broadcast write of the stub ledger."""

    tx_ref: str
    confirmation: asyncio.Event = field(default_factory=asyncio.Event)
    revert_reason: str | None = None

    async def wait(self) -> None:
        await self.confirmation.wait()
        if self.revert_reason is not None:
            raise LedgerRejectedError(self.revert_reason)


class LedgerGatewayStub:
    """In-memory stub implementation of LedgerGatewayProtocol.

    NOT suitable for production use.

    Attributes:
        verification_writes: (record_id, accepted) per verification submission.
        created_ids: Ids of records created through create_record().
        get_record_calls: Number of get_record() calls.
        parked_enumerations: list_record_ids() calls waiting on a gate.
    """

    def __init__(
        self,
        target_context: str = DEFAULT_TARGET_CONTEXT,
        time_authority: TimeAuthorityProtocol | None = None,
    ) -> None:
        self._target_context = target_context
        self._time = time_authority
        self._records: dict[str, StoredRecord] = {}
        self._available = True
        self._availability_error: Exception | None = None
        self._enumeration_error: Exception | None = None
        self._failing_records: set[str] = set()
        self._enumeration_gates: list[asyncio.Event] = []
        self._create_rejections: list[LedgerRejectedError] = []
        self._verification_rejections: list[LedgerRejectedError] = []
        self._confirmations_paused = False
        self._pending: list[StubTransaction] = []
        self._tx_counter = itertools.count(1)
        self._block_time = itertools.count(1_700_000_000)
        self.verification_writes: list[tuple[str, bool]] = []
        self.created_ids: list[str] = []
        self.get_record_calls = 0
        self.parked_enumerations = 0

    # =========================================================================
    # Read surface
    # =========================================================================

    async def list_record_ids(self) -> list[str]:
        if self._enumeration_error is not None:
            raise self._enumeration_error
        record_ids = list(self._records)
        if self._enumeration_gates:
            gate = self._enumeration_gates.pop(0)
            self.parked_enumerations += 1
            try:
                await gate.wait()
            finally:
                self.parked_enumerations -= 1
        return record_ids

    async def get_record(self, record_id: str) -> dict[str, Any]:
        self.get_record_calls += 1
        await asyncio.sleep(0)
        if record_id in self._failing_records:
            raise LedgerUnreachableError(f"RPC error reading {record_id}")
        return self._require(record_id).public_fields()

    async def get_ciphertext_handle(self, record_id: str) -> str:
        return "0x" + self._require(record_id).ciphertext.hex()

    async def is_available(self) -> bool:
        if self._availability_error is not None:
            raise self._availability_error
        return self._available

    async def get_target_context(self) -> str:
        return self._target_context

    # =========================================================================
    # Write surface
    # =========================================================================

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
    ) -> StubTransaction:
        if self._create_rejections:
            raise self._create_rejections.pop(0)
        if record_id in self._records:
            raise RecordIdCollisionError(record_id)
        if not ciphertext or not proof:
            raise LedgerRejectedError("invalid encrypted input")

        self._records[record_id] = StoredRecord(
            record_id=record_id,
            title=title,
            description=purpose_label,
            category=category,
            secondary_value=secondary_value,
            creator=sender,
            created_at=self._now_seconds(),
            ciphertext=ciphertext,
            proof=proof,
        )
        self.created_ids.append(record_id)
        return self._broadcast()

    async def submit_verification(
        self,
        record_id: str,
        encoded_clear_values: bytes,
        proof: bytes,
        sender: str,
    ) -> StubTransaction:
        record = self._require(record_id)
        if self._verification_rejections:
            self.verification_writes.append((record_id, False))
            raise self._verification_rejections.pop(0)
        if record.verified:
            self.verification_writes.append((record_id, False))
            raise AlreadyVerifiedError(record_id)
        if not proof:
            self.verification_writes.append((record_id, False))
            raise LedgerRejectedError("invalid decryption proof")

        values = decode_clear_values(encoded_clear_values)
        record.verified = True
        record.revealed_value = values[0] if values else 0
        self.verification_writes.append((record_id, True))
        return self._broadcast()

    # =========================================================================
    # Test controls
    # =========================================================================

    def seed_record(
        self,
        record_id: str,
        title: str = "Seeded request",
        *,
        description: str = "Alumni Support Request",
        category: int = 1,
        creator: str = "0xSeed",
        ciphertext: bytes = b"\x01" * 32,
        verified: bool = False,
        revealed_value: int = 0,
    ) -> StoredRecord:
        record = StoredRecord(
            record_id=record_id,
            title=title,
            description=description,
            category=category,
            secondary_value=0,
            creator=creator,
            created_at=self._now_seconds(),
            ciphertext=ciphertext,
            proof=b"seed-proof",
            verified=verified,
            revealed_value=revealed_value,
        )
        self._records[record_id] = record
        return record

    def stored(self, record_id: str) -> StoredRecord:
        return self._require(record_id)

    def set_available(self, available: bool) -> None:
        self._available = available

    def fail_availability(self, error: Exception | None = None) -> None:
        self._availability_error = error or LedgerUnreachableError("probe failed")

    def fail_enumeration(self, error: Exception | None = None) -> None:
        self._enumeration_error = error or LedgerUnreachableError("RPC down")

    def restore_enumeration(self) -> None:
        self._enumeration_error = None

    def fail_record(self, record_id: str) -> None:
        self._failing_records.add(record_id)

    def add_enumeration_gate(self) -> asyncio.Event:
        gate = asyncio.Event()
        self._enumeration_gates.append(gate)
        return gate

    def reject_next_create(self, reason: str, *, user_declined: bool = False) -> None:
        self._create_rejections.append(
            LedgerRejectedError(reason, user_declined=user_declined)
        )

    def reject_next_verification(
        self, reason: str, *, user_declined: bool = False
    ) -> None:
        self._verification_rejections.append(
            LedgerRejectedError(reason, user_declined=user_declined)
        )

    def pause_confirmations(self) -> None:
        self._confirmations_paused = True

    @property
    def awaiting_confirmation(self) -> int:
        return len(self._pending)

    def resume_confirmations(self) -> None:
        self._confirmations_paused = False
        for tx in self._pending:
            tx.confirmation.set()
        self._pending.clear()

    def _broadcast(self) -> StubTransaction:
        tx = StubTransaction(tx_ref=f"0xtx{next(self._tx_counter):04d}")
        if self._confirmations_paused:
            self._pending.append(tx)
        else:
            tx.confirmation.set()
        return tx

    def _require(self, record_id: str) -> StoredRecord:
        record = self._records.get(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        return record

    def _now_seconds(self) -> int:
        if self._time is not None:
            return int(self._time.utcnow().timestamp())
        return next(self._block_time)
