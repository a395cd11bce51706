"""Result types for the Create, Sync and Verify protocols."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from confidential_aid.domain.models.aid_request import AidRequest
from confidential_aid.domain.models.session_view import SessionViewState


class VerificationStage(Enum):
    """Stages of one decrypt-and-verify invocation.

    START -> CHECK_VERIFIED -> FETCH_HANDLE -> DECRYPT_AND_PROVE -> RECONCILE
    ending in DONE or FAILED. CHECK_VERIFIED jumps straight to DONE when the
    ledger already reports the record as verified.
    """

    START = "start"
    CHECK_VERIFIED = "check_verified"
    FETCH_HANDLE = "fetch_handle"
    DECRYPT_AND_PROVE = "decrypt_and_prove"
    RECONCILE = "reconcile"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncOutcome:
    """Result of one sync run.

    Attributes:
        ticket: Start-order number of this sync.
        applied: False when a newer sync had already been applied.
        record_count: Records in the fetched snapshot.
        dropped_ids: Ids whose fetch failed and were left out.
        state: The session state after this sync (unchanged if not applied).
    """

    ticket: int
    applied: bool
    record_count: int
    dropped_ids: tuple[str, ...]
    state: SessionViewState


@dataclass(frozen=True)
class CreateRequestResult:
    """Result of a successful create.

    Attributes:
        record_id: Id of the new record.
        tx_ref: Reference of the included creation transaction.
        record: The record as seen by the follow-up sync, None if that sync
            failed or has not picked it up yet.
        synced: Whether the follow-up sync was applied.
    """

    record_id: str
    tx_ref: str
    record: AidRequest | None = field(default=None)
    synced: bool = field(default=False)


@dataclass(frozen=True)
class VerifiedDecryption:
    """A decryption whose proof has been included on the ledger.

    Only produced after the submit callback's write was confirmed, so holding
    one means the proof cannot have been generated and then dropped.

    Attributes:
        record_id: The decrypted record.
        clear_value: Cleartext returned by the decryption service.
        tx_ref: Reference of the included verification transaction.
    """

    record_id: str
    clear_value: int
    tx_ref: str


@dataclass(frozen=True)
class VerificationOutcome:
    """Result of a verify invocation.

    transient_value is the cleartext from a just-completed decryption and is
    for display only; confirmed_value is what the ledger reports after sync.
    The two are never merged into session state.

    Attributes:
        record_id: The record that was verified.
        stage: Terminal stage reached.
        transient_value: Locally decrypted cleartext, if a decryption ran.
        confirmed_value: Ledger revealed_value once verified, else None.
        already_verified: True when no new proof was accepted because the
            record was verified before or concurrently.
    """

    record_id: str
    stage: VerificationStage
    transient_value: int | None = field(default=None)
    confirmed_value: int | None = field(default=None)
    already_verified: bool = field(default=False)

    @property
    def is_confirmed(self) -> bool:
        """Whether the ledger has confirmed the revealed value."""
        return self.confirmed_value is not None

    @property
    def display_value(self) -> int | None:
        """Value to show: the ledger's if confirmed, else the transient one."""
        if self.confirmed_value is not None:
            return self.confirmed_value
        return self.transient_value
