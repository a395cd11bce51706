"""Encrypted Request Lifecycle Service.

This service orchestrates the encrypted aid request protocols against the
ledger gateway, the encryption service and the decryption-verification
service, and owns the session view state the presentation layer renders.

Protocols:
- Create: encrypt an amount, write a new record, wait for inclusion, sync
- Sync: rebuild the record snapshot from the ledger and swap it in
- Verify: decrypt a record's amount and have the ledger accept the proof

Rules:
1. IDENTITY FIRST - Create and Verify reject before any external call
2. STATE IS REPLACED, NEVER PATCHED - only a sync swaps in new records
3. NEWEST SNAPSHOT WINS - a sync superseded by a newer applied one is dropped
4. FAIL LOUD - failures become an error status and are re-raised, never retried
5. ALREADY VERIFIED IS NOT A FAILURE - the race maps to a success status
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable

import structlog

from confidential_aid.application.dtos.lifecycle import (
    CreateRequestResult,
    SyncOutcome,
    VerificationOutcome,
    VerificationStage,
    VerifiedDecryption,
)
from confidential_aid.application.ports.decryption_verification import (
    DecryptionVerificationProtocol,
)
from confidential_aid.application.ports.encryption_service import (
    EncryptedInput,
    EncryptionServiceProtocol,
)
from confidential_aid.application.ports.ledger_gateway import (
    LedgerGatewayProtocol,
    LedgerTransaction,
)
from confidential_aid.application.ports.time_authority import TimeAuthorityProtocol
from confidential_aid.application.services.base import LoggingMixin
from confidential_aid.application.services.status_board import StatusBoard
from confidential_aid.config.lifecycle_config import (
    DEFAULT_LIFECYCLE_CONFIG,
    LifecycleConfig,
)
from confidential_aid.domain.errors import (
    AidRequestError,
    DecryptionFailedError,
    EncryptionFailedError,
    InvalidRequestInputError,
    LedgerRejectedError,
    LedgerTimeoutError,
    LedgerUnreachableError,
    RecordIdCollisionError,
    UnauthenticatedError,
    is_already_verified_signal,
    is_user_rejection,
)
from confidential_aid.domain.models.aid_request import AidRequest
from confidential_aid.domain.models.session_view import SessionViewState
from confidential_aid.domain.models.status_notification import StatusNotification
from confidential_aid.infrastructure.observability.correlation import (
    correlation_scope,
)

# User-facing status messages
MSG_CONNECT_FIRST = "Please connect wallet first"
MSG_CREATING = "Creating request with encryption..."
MSG_AWAITING_CONFIRMATION = "Waiting for confirmation..."
MSG_CREATED = "Request created!"
MSG_TX_REJECTED = "Transaction rejected"
MSG_SUBMISSION_FAILED = "Submission failed"
MSG_VERIFYING = "Verifying..."
MSG_VERIFIED = "Verified successfully!"
MSG_ALREADY_VERIFIED = "Already verified"
MSG_DECRYPTION_FAILED = "Decryption failed"
MSG_LOAD_FAILED = "Failed to load data"
MSG_AVAILABLE = "System available!"
MSG_CHECK_FAILED = "Check failed"
MSG_ENCRYPTION_INIT_FAILED = "Encryption initialization failed"


class RequestLifecycleService(LoggingMixin):
    """Controller for encrypted aid requests.

    All protocol steps are awaits on external services; the only shared
    mutable state is the session view, which is swapped by _apply_snapshot
    and nowhere else.

    Attributes:
        _ledger: Ledger gateway (reads and writes).
        _encryption: Client-side encryption service.
        _decryption: Decrypt-and-prove service.
        _time: Clock for id generation and status expiry.
        _config: Lifecycle tunables.
        _status: Single-slot status board.
        _state: Current session view state.
        _identity: Connected wallet identity, None when disconnected.
        _sync_started: Ticket of the most recently started sync.
        _sync_applied: Ticket of the most recently applied sync.
        _session_epoch: Bumped by connect and disconnect; work started in an
            earlier epoch no longer touches state or status.
    """

    def __init__(
        self,
        ledger: LedgerGatewayProtocol,
        encryption: EncryptionServiceProtocol,
        decryption: DecryptionVerificationProtocol,
        time_authority: TimeAuthorityProtocol,
        config: LifecycleConfig | None = None,
        status_board: StatusBoard | None = None,
    ) -> None:
        """Initialize the lifecycle service.

        Args:
            ledger: Ledger gateway implementation.
            encryption: Encryption service implementation.
            decryption: Decryption-verification service implementation.
            time_authority: Clock used for ids and status expiry.
            config: Optional tunables, defaults to DEFAULT_LIFECYCLE_CONFIG.
            status_board: Optional shared status board.
        """
        self._ledger = ledger
        self._encryption = encryption
        self._decryption = decryption
        self._time = time_authority
        self._config = config or DEFAULT_LIFECYCLE_CONFIG
        self._status = status_board or StatusBoard(time_authority, self._config)
        self._state = SessionViewState.empty()
        self._identity: str | None = None
        self._encryption_identity: str | None = None
        self._encryption_lock = asyncio.Lock()
        self._target_context: str | None = None
        self._sync_started = 0
        self._sync_applied = 0
        self._session_epoch = 0
        self._last_id_millis = 0
        self._init_logger(component="lifecycle")

    # =========================================================================
    # Read-only views
    # =========================================================================

    @property
    def state(self) -> SessionViewState:
        """The current session view state."""
        return self._state

    @property
    def identity(self) -> str | None:
        return self._identity

    @property
    def is_connected(self) -> bool:
        return self._identity is not None

    @property
    def status_board(self) -> StatusBoard:
        return self._status

    def current_status(self) -> StatusNotification | None:
        """The visible status notification, None once it has expired."""
        return self._status.current()

    def visible_requests(self, search_term: str = "") -> tuple[AidRequest, ...]:
        """Records of the current snapshot matching a search term."""
        return self._state.search(search_term)

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    async def connect(self, identity: str) -> SessionViewState:
        """Bind a wallet identity and load the session.

        Initialises the encryption service and runs the first sync. Neither
        failure disconnects the session: encryption initialisation is retried
        lazily by the next create, and the next refresh retries the sync.

        Args:
            identity: Wallet identity to bind.

        Returns:
            The session view state after the initial sync.

        Raises:
            UnauthenticatedError: If identity is blank.
        """
        operation = "connect"
        if not identity or not identity.strip():
            raise UnauthenticatedError(operation)

        with correlation_scope():
            log = self._log_operation(operation, identity=identity)
            self._session_epoch += 1
            epoch = self._session_epoch
            self._bind_identity(identity)
            log.info("session_connected", epoch=epoch)

            try:
                await self._ensure_encryption_ready(identity)
            except EncryptionFailedError as e:
                log.error("encryption_initialization_failed", error=str(e))
                if self._session_live(epoch):
                    self._status.error(operation, MSG_ENCRYPTION_INIT_FAILED)

            if not self._session_live(epoch):
                log.info("connect_superseded")
                return self._state

            try:
                await self._sync()
            except LedgerUnreachableError as e:
                log.error("initial_sync_failed", error=str(e))
                if self._session_live(epoch):
                    self._status.error(operation, MSG_LOAD_FAILED)

            return self._state

    def switch_identity(self, identity: str) -> SessionViewState:
        """Rebind the active identity without resyncing.

        The user history is recomputed from the current snapshot; the
        encryption service is re-initialised for the new identity on the
        next create.
        """
        if not identity or not identity.strip():
            raise UnauthenticatedError("switch_identity")
        self._bind_identity(identity)
        self._log_operation("switch_identity", identity=identity).info(
            "identity_switched"
        )
        return self._state

    def disconnect(self) -> None:
        """Drop the identity and discard every record of this session.

        In-flight syncs started before the disconnect are discarded when
        they complete. Creates and verifies still running finish their
        ledger calls and return to their callers, but no longer sync or
        write a status.
        """
        log = self._log_operation("disconnect", identity=self._identity)
        self._session_epoch += 1
        self._identity = None
        self._encryption_identity = None
        self._target_context = None
        self._sync_started += 1
        self._sync_applied = self._sync_started
        self._state = SessionViewState.empty()
        self._status.clear()
        log.info("session_disconnected")

    def _bind_identity(self, identity: str) -> None:
        self._identity = identity
        self._state = self._state.with_identity(identity)

    def _session_live(self, epoch: int) -> bool:
        return epoch == self._session_epoch

    # =========================================================================
    # Availability probe
    # =========================================================================

    async def check_availability(self) -> bool:
        """Probe the ledger contract's availability flag.

        Returns:
            True if the ledger reports itself available, False otherwise
            (including when the probe fails).
        """
        operation = "check_availability"
        with correlation_scope():
            log = self._log_operation(operation)
            try:
                available = await self._ledger.is_available()
            except Exception as e:
                log.warning("availability_check_failed", error=str(e))
                self._status.error(operation, MSG_CHECK_FAILED)
                return False

            if available:
                self._status.success(operation, MSG_AVAILABLE)
            else:
                log.warning("ledger_reports_unavailable")
            return available

    # =========================================================================
    # Sync protocol
    # =========================================================================

    async def refresh(self) -> SyncOutcome:
        """Run a sync on user request, reporting failure as a status.

        Returns:
            The sync outcome.

        Raises:
            LedgerUnreachableError: If the record ids cannot be enumerated.
        """
        operation = "refresh"
        with correlation_scope():
            try:
                return await self._sync()
            except LedgerUnreachableError as e:
                self._log_operation(operation).error("refresh_failed", error=str(e))
                self._status.error(operation, MSG_LOAD_FAILED)
                raise

    async def _sync(self) -> SyncOutcome:
        """Fetch a best-effort snapshot of the ledger and apply it.

        Per-record fetch failures drop that record only. Enumeration failure
        aborts the sync and leaves the current state untouched.
        """
        self._sync_started += 1
        ticket = self._sync_started
        epoch = self._session_epoch
        log = self._log_operation("sync", ticket=ticket)
        log.debug("sync_started")

        try:
            record_ids = await self._ledger.list_record_ids()
        except LedgerUnreachableError:
            log.error("sync_enumeration_failed")
            raise
        except Exception as e:
            log.error("sync_enumeration_failed", error=str(e))
            raise LedgerUnreachableError(f"Cannot enumerate records: {e}") from e

        unique_ids = list(dict.fromkeys(record_ids))
        fetched = await asyncio.gather(
            *(self._fetch_for_sync(record_id, ticket) for record_id in unique_ids)
        )
        records = [record for record in fetched if record is not None]
        dropped = tuple(
            record_id
            for record_id, record in zip(unique_ids, fetched)
            if record is None
        )

        applied = self._apply_snapshot(ticket, epoch, records)
        if applied:
            log.info(
                "sync_applied",
                record_count=len(records),
                dropped_count=len(dropped),
                verified=self._state.stats.verified,
            )
        else:
            log.info(
                "sync_snapshot_discarded",
                superseded_by=self._sync_applied,
                record_count=len(records),
            )

        return SyncOutcome(
            ticket=ticket,
            applied=applied,
            record_count=len(records),
            dropped_ids=dropped,
            state=self._state,
        )

    async def _fetch_for_sync(self, record_id: str, ticket: int) -> AidRequest | None:
        try:
            data = await self._ledger.get_record(record_id)
            return AidRequest.from_ledger(record_id, data)
        except Exception as e:
            self._log_operation("sync", ticket=ticket).warning(
                "record_fetch_failed_dropped",
                record_id=record_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    def _apply_snapshot(
        self, ticket: int, epoch: int, records: list[AidRequest]
    ) -> bool:
        if ticket <= self._sync_applied or not self._session_live(epoch):
            return False
        self._sync_applied = ticket
        self._state = SessionViewState.from_snapshot(records, self._identity)
        return True

    async def _reconcile(self, epoch: int) -> SyncOutcome | None:
        """Sync after a write; a failure here is logged, not raised.

        Skipped once the session that issued the write has ended.
        """
        if not self._session_live(epoch):
            self._log_operation("reconcile").info("reconcile_skipped_session_ended")
            return None
        try:
            return await self._sync()
        except LedgerUnreachableError as e:
            self._log_operation("reconcile").warning(
                "reconcile_sync_failed", error=str(e)
            )
            return None

    # =========================================================================
    # Create protocol
    # =========================================================================

    async def create_request(
        self, title: str, amount: int, category: int
    ) -> CreateRequestResult:
        """Encrypt an amount and record it as a new aid request.

        Steps:
        1. Reject if no identity is connected
        2. Validate input
        3. Ensure the encryption service is initialised
        4. Encrypt the amount for the ledger contract
        5. Write the record under a fresh id, retrying on id collision
        6. Wait for block inclusion
        7. Sync so the new record is visible, then report success

        Args:
            title: Public title (non-blank).
            amount: Plaintext amount, a non-negative integer.
            category: Positive public category selector.

        Returns:
            CreateRequestResult for the included record.

        Raises:
            UnauthenticatedError: If no identity is connected.
            InvalidRequestInputError: If input fails validation.
            EncryptionFailedError: If initialisation or encryption fails.
            LedgerRejectedError: If the write is declined or reverted.
            LedgerTimeoutError: If the write is not included in time.
            LedgerUnreachableError: If the target context cannot be read.
        """
        operation = "create_request"
        with correlation_scope():
            log = self._log_operation(
                operation, category=category, title_length=len(title or "")
            )

            epoch = self._session_epoch
            identity = self._identity
            if identity is None:
                log.warning("create_rejected_unauthenticated")
                self._status.error(operation, MSG_CONNECT_FIRST)
                raise UnauthenticatedError(operation)

            try:
                clean_title = _validate_create_input(title, amount, category)
            except InvalidRequestInputError as e:
                log.warning("create_rejected_invalid_input", field=e.field)
                self._status.error(operation, str(e))
                raise

            self._status.pending(operation, MSG_CREATING)
            log.info("create_started")

            try:
                await self._ensure_encryption_ready(identity)
                target_context = await self._resolve_target_context()
                encrypted = await self._encrypt(target_context, identity, amount)
                log.debug("amount_encrypted", ciphertext_size=len(encrypted.ciphertext))
                record_id, tx_ref = await self._write_new_record(
                    operation, epoch, identity, clean_title, category, encrypted
                )
            except AidRequestError as e:
                log.error(
                    "create_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                message = MSG_TX_REJECTED if is_user_rejection(e) else MSG_SUBMISSION_FAILED
                if self._session_live(epoch):
                    self._status.error(operation, message)
                raise

            log.info("create_included", record_id=record_id, tx_ref=tx_ref)
            outcome = await self._reconcile(epoch)
            live = self._session_live(epoch)
            if live:
                self._status.success(operation, MSG_CREATED)
            else:
                log.info("create_outlived_session", record_id=record_id)

            return CreateRequestResult(
                record_id=record_id,
                tx_ref=tx_ref,
                record=self._state.get(record_id) if live else None,
                synced=outcome is not None and outcome.applied,
            )

    async def _encrypt(
        self, target_context: str, identity: str, amount: int
    ) -> EncryptedInput:
        try:
            return await self._encryption.encrypt(target_context, identity, amount)
        except EncryptionFailedError:
            raise
        except Exception as e:
            raise EncryptionFailedError(f"Encryption failed: {e}") from e

    async def _write_new_record(
        self,
        operation: str,
        epoch: int,
        identity: str,
        title: str,
        category: int,
        encrypted: EncryptedInput,
    ) -> tuple[str, str]:
        """Submit the record, regenerating the id if the ledger has it already."""
        taken = set(self._state.record_ids())
        log = self._log_operation(operation)

        for attempt in range(1, self._config.max_id_attempts + 1):
            record_id = self._next_request_id(taken)
            try:
                tx = await self._call_write(
                    self._ledger.create_record(
                        record_id,
                        title,
                        encrypted.ciphertext,
                        encrypted.proof,
                        category,
                        0,
                        self._config.purpose_label,
                        identity,
                    )
                )
                if self._session_live(epoch):
                    self._status.pending(operation, MSG_AWAITING_CONFIRMATION)
                log.info("create_broadcast", record_id=record_id, tx_ref=tx.tx_ref)
                await self._await_inclusion(tx)
            except RecordIdCollisionError:
                log.warning("request_id_collision", record_id=record_id, attempt=attempt)
                taken.add(record_id)
                continue
            return record_id, tx.tx_ref

        raise LedgerRejectedError(
            f"no free request id after {self._config.max_id_attempts} attempts"
        )

    def _next_request_id(self, taken: set[str]) -> str:
        """Timestamp-derived id, bumped past ids already issued or seen."""
        millis = int(self._time.utcnow().timestamp() * 1000)
        millis = max(millis, self._last_id_millis + 1)
        candidate = f"{self._config.request_id_prefix}{millis}"
        while candidate in taken:
            millis += 1
            candidate = f"{self._config.request_id_prefix}{millis}"
        self._last_id_millis = millis
        return candidate

    # =========================================================================
    # Verify protocol
    # =========================================================================

    async def verify_request(self, record_id: str) -> VerificationOutcome:
        """Reveal a record's amount through the decrypt-and-verify exchange.

        Re-verifying an already verified record performs no decryption and
        returns the ledger's revealed value. A concurrent verification that
        wins the race is reported as success, not as an error.

        Args:
            record_id: The record to verify.

        Returns:
            VerificationOutcome with the transient and confirmed values.

        Raises:
            UnauthenticatedError: If no identity is connected.
            RecordNotFoundError: If the record does not exist.
            LedgerUnreachableError: If the record or handle cannot be read.
            LedgerRejectedError: If the verification write is declined.
            LedgerTimeoutError: If the verification write is not included.
            DecryptionFailedError: If the exchange fails otherwise.
        """
        operation = "verify_request"
        with correlation_scope():
            log = self._log_operation(operation, record_id=record_id)

            epoch = self._session_epoch
            identity = self._identity
            if identity is None:
                log.warning("verify_rejected_unauthenticated")
                self._status.error(operation, MSG_CONNECT_FIRST)
                raise UnauthenticatedError(operation)

            stage = VerificationStage.START
            try:
                stage = self._enter(log, VerificationStage.CHECK_VERIFIED)
                record = await self._read_record(record_id)
                if record.verified:
                    log.info(
                        "verify_short_circuit",
                        revealed_value=record.revealed_value,
                    )
                    if self._session_live(epoch):
                        self._status.success(operation, MSG_ALREADY_VERIFIED)
                    return VerificationOutcome(
                        record_id=record_id,
                        stage=VerificationStage.DONE,
                        confirmed_value=record.revealed_value,
                        already_verified=True,
                    )

                stage = self._enter(log, VerificationStage.FETCH_HANDLE)
                handle = await self._read_handle(record_id)
                target_context = await self._resolve_target_context()

                stage = self._enter(log, VerificationStage.DECRYPT_AND_PROVE)
                if self._session_live(epoch):
                    self._status.pending(operation, MSG_VERIFYING)
                verified = await self._decrypt_and_submit(
                    record_id, handle, target_context, identity
                )
            except Exception as e:
                return await self._finish_failed_verify(
                    operation, epoch, record_id, stage, e
                )

            self._enter(log, VerificationStage.RECONCILE)
            await self._reconcile(epoch)
            confirmed = self._confirmed_value(epoch, record_id)
            log.info(
                "verify_completed",
                tx_ref=verified.tx_ref,
                confirmed=confirmed is not None,
            )
            if self._session_live(epoch):
                self._status.success(operation, MSG_VERIFIED)
            return VerificationOutcome(
                record_id=record_id,
                stage=VerificationStage.DONE,
                transient_value=verified.clear_value,
                confirmed_value=confirmed,
            )

    async def _finish_failed_verify(
        self,
        operation: str,
        epoch: int,
        record_id: str,
        stage: VerificationStage,
        error: Exception,
    ) -> VerificationOutcome:
        """Handle a verify failure: benign race or reported error."""
        log = self._log_operation(operation, record_id=record_id, stage=stage.value)

        if is_already_verified_signal(error):
            log.info("verify_lost_race_already_verified")
            self._enter(log, VerificationStage.RECONCILE)
            await self._reconcile(epoch)
            if self._session_live(epoch):
                self._status.success(operation, MSG_ALREADY_VERIFIED)
            return VerificationOutcome(
                record_id=record_id,
                stage=VerificationStage.DONE,
                confirmed_value=self._confirmed_value(epoch, record_id),
                already_verified=True,
            )

        self._enter(log, VerificationStage.RECONCILE)
        await self._reconcile(epoch)

        self._enter(log, VerificationStage.FAILED)
        log.error(
            "verify_failed",
            error=str(error),
            error_type=type(error).__name__,
        )
        message = MSG_TX_REJECTED if is_user_rejection(error) else MSG_DECRYPTION_FAILED
        if self._session_live(epoch):
            self._status.error(operation, message)

        if isinstance(error, AidRequestError):
            raise error
        raise DecryptionFailedError(f"Decryption of {record_id} failed: {error}") from error

    async def _decrypt_and_submit(
        self,
        record_id: str,
        handle: str,
        target_context: str,
        identity: str,
    ) -> VerifiedDecryption:
        """Run decrypt-and-prove with proof submission bound into the call.

        The decryption service invokes submit itself; this returns only once
        that write has been included, so a proof cannot be produced and then
        left unsubmitted.
        """
        included: list[str] = []

        async def submit(encoded_clear_values: bytes, proof: bytes) -> None:
            tx = await self._call_write(
                self._ledger.submit_verification(
                    record_id, encoded_clear_values, proof, identity
                )
            )
            self._log_operation("verify_request", record_id=record_id).info(
                "verification_broadcast", tx_ref=tx.tx_ref
            )
            await self._await_inclusion(tx)
            included.append(tx.tx_ref)

        result = await self._decryption.verify_decryption(
            [handle], target_context, submit
        )

        if not included:
            raise DecryptionFailedError(
                f"Decryption proof for {record_id} was not submitted to the ledger"
            )
        if handle not in result.clear_values:
            raise DecryptionFailedError(
                f"Decryption result for {record_id} is missing its handle"
            )
        return VerifiedDecryption(
            record_id=record_id,
            clear_value=int(result.clear_values[handle]),
            tx_ref=included[-1],
        )

    async def _read_record(self, record_id: str) -> AidRequest:
        try:
            data = await self._ledger.get_record(record_id)
        except AidRequestError:
            raise
        except Exception as e:
            raise LedgerUnreachableError(f"Cannot read {record_id}: {e}") from e
        return AidRequest.from_ledger(record_id, data)

    async def _read_handle(self, record_id: str) -> str:
        try:
            return await self._ledger.get_ciphertext_handle(record_id)
        except AidRequestError:
            raise
        except Exception as e:
            raise LedgerUnreachableError(
                f"Cannot read ciphertext handle of {record_id}: {e}"
            ) from e

    def _confirmed_value(self, epoch: int, record_id: str) -> int | None:
        if not self._session_live(epoch):
            return None
        record = self._state.get(record_id)
        return record.confirmed_value if record is not None else None

    @staticmethod
    def _enter(
        log: structlog.BoundLogger, stage: VerificationStage
    ) -> VerificationStage:
        log.debug("verify_stage_entered", next_stage=stage.value)
        return stage

    # =========================================================================
    # Shared helpers
    # =========================================================================

    async def _ensure_encryption_ready(self, identity: str) -> None:
        """Initialise the encryption service once per connected identity.

        An initialisation that completes after the session ended is not
        remembered, so the next session initialises again.
        """
        epoch = self._session_epoch
        async with self._encryption_lock:
            if (
                self._encryption.is_initialized
                and self._encryption_identity == identity
            ):
                return
            try:
                await self._encryption.initialize(identity)
            except Exception as e:
                raise EncryptionFailedError(
                    f"Encryption service initialization failed: {e}"
                ) from e
            if not self._session_live(epoch):
                self._log_operation("encryption_init", identity=identity).info(
                    "encryption_initialized_after_session_ended"
                )
                return
            self._encryption_identity = identity
            self._log_operation("encryption_init", identity=identity).info(
                "encryption_initialized"
            )

    async def _resolve_target_context(self) -> str:
        """Contract address ciphertexts are bound to, cached per session."""
        if self._target_context is not None:
            return self._target_context
        epoch = self._session_epoch
        try:
            target_context = await self._ledger.get_target_context()
        except AidRequestError:
            raise
        except Exception as e:
            raise LedgerUnreachableError(f"Cannot resolve target context: {e}") from e
        if self._session_live(epoch):
            self._target_context = target_context
        return target_context

    async def _call_write(
        self, call: Awaitable[LedgerTransaction]
    ) -> LedgerTransaction:
        """Await a ledger write broadcast, translating foreign errors."""
        try:
            return await call
        except AidRequestError:
            raise
        except Exception as e:
            raise LedgerRejectedError(str(e), user_declined=is_user_rejection(e)) from e

    async def _await_inclusion(self, tx: LedgerTransaction) -> None:
        """Wait for block inclusion within the configured timeout.

        The broadcast write itself cannot be recalled; on timeout the
        controller only stops waiting for it.
        """
        timeout = self._config.confirmation_timeout_seconds
        try:
            await asyncio.wait_for(tx.wait(), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise LedgerTimeoutError(tx.tx_ref, timeout) from e
        except AidRequestError:
            raise
        except Exception as e:
            raise LedgerRejectedError(str(e), user_declined=is_user_rejection(e)) from e


def _validate_create_input(title: str, amount: int, category: int) -> str:
    """Validate create input, returning the stripped title."""
    clean_title = (title or "").strip()
    if not clean_title:
        raise InvalidRequestInputError("title", "must not be empty")
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidRequestInputError("amount", "must be an integer")
    if amount < 0:
        raise InvalidRequestInputError("amount", "must not be negative")
    if isinstance(category, bool) or not isinstance(category, int) or category < 1:
        raise InvalidRequestInputError("category", "must be a positive integer")
    return clean_title
