"""Unit tests for the Verify protocol of RequestLifecycleService."""

import asyncio

import pytest

from confidential_aid.application.dtos.lifecycle import VerificationStage
from confidential_aid.application.services.request_lifecycle_service import (
    MSG_ALREADY_VERIFIED,
    MSG_CONNECT_FIRST,
    MSG_DECRYPTION_FAILED,
    MSG_TX_REJECTED,
    MSG_VERIFIED,
    RequestLifecycleService,
)
from confidential_aid.config.lifecycle_config import TEST_LIFECYCLE_CONFIG
from confidential_aid.domain.errors import (
    DecryptionFailedError,
    LedgerRejectedError,
    LedgerTimeoutError,
    RecordNotFoundError,
    UnauthenticatedError,
)
from confidential_aid.domain.models.status_notification import StatusKind
from confidential_aid.infrastructure.stubs import (
    DecryptionVerificationStub,
    EncryptionServiceStub,
    LedgerGatewayStub,
)
from tests.helpers import ALICE, FakeTimeAuthority


def _status(service: RequestLifecycleService) -> tuple[StatusKind, str]:
    status = service.current_status()
    assert status is not None
    return status.kind, status.message


async def _until(condition, attempts: int = 200) -> None:
    for _ in range(attempts):
        if condition():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never became true")


def _service_with(
    ledger: LedgerGatewayStub,
    encryption: EncryptionServiceStub,
    decryption: DecryptionVerificationStub,
    time_authority: FakeTimeAuthority,
) -> RequestLifecycleService:
    return RequestLifecycleService(
        ledger=ledger,
        encryption=encryption,
        decryption=decryption,
        time_authority=time_authority,
        config=TEST_LIFECYCLE_CONFIG,
    )


class TestVerifyRequest:
    """Tests for the happy path of verify_request."""

    async def test_verify_reveals_amount(
        self,
        connected_service: RequestLifecycleService,
        ledger: LedgerGatewayStub,
    ) -> None:
        created = await connected_service.create_request("Tuition", 500, 1)

        outcome = await connected_service.verify_request(created.record_id)

        assert outcome.stage is VerificationStage.DONE
        assert outcome.transient_value == 500
        assert outcome.confirmed_value == 500
        assert outcome.is_confirmed
        assert outcome.display_value == 500
        assert outcome.already_verified is False

        record = connected_service.state.get(created.record_id)
        assert record is not None
        assert record.verified is True
        assert record.revealed_value == 500
        assert connected_service.state.stats.verified == 1
        assert ledger.verification_writes == [(created.record_id, True)]
        assert _status(connected_service) == (StatusKind.SUCCESS, MSG_VERIFIED)

    async def test_reverify_short_circuits(
        self,
        connected_service: RequestLifecycleService,
        ledger: LedgerGatewayStub,
        decryption: DecryptionVerificationStub,
    ) -> None:
        created = await connected_service.create_request("Tuition", 500, 1)
        await connected_service.verify_request(created.record_id)

        again = await connected_service.verify_request(created.record_id)

        assert again.already_verified is True
        assert again.confirmed_value == 500
        assert again.transient_value is None
        assert len(decryption.calls) == 1
        assert ledger.verification_writes == [(created.record_id, True)]
        assert _status(connected_service) == (StatusKind.SUCCESS, MSG_ALREADY_VERIFIED)

    async def test_requires_identity(
        self,
        service: RequestLifecycleService,
        ledger: LedgerGatewayStub,
        decryption: DecryptionVerificationStub,
    ) -> None:
        ledger.seed_record("request-1")

        with pytest.raises(UnauthenticatedError):
            await service.verify_request("request-1")

        assert decryption.calls == []
        assert _status(service) == (StatusKind.ERROR, MSG_CONNECT_FIRST)

    async def test_unknown_record(
        self, connected_service: RequestLifecycleService
    ) -> None:
        with pytest.raises(RecordNotFoundError):
            await connected_service.verify_request("request-404")

        assert _status(connected_service) == (StatusKind.ERROR, MSG_DECRYPTION_FAILED)


class TestAlreadyVerifiedRace:
    """Tests for a concurrent verifier winning the race."""

    async def test_two_concurrent_verifies_write_once(
        self,
        ledger: LedgerGatewayStub,
        encryption: EncryptionServiceStub,
        fake_time_authority: FakeTimeAuthority,
    ) -> None:
        gate = asyncio.Event()
        decryption = DecryptionVerificationStub(encryption, gate=gate)
        service = _service_with(ledger, encryption, decryption, fake_time_authority)
        await service.connect(ALICE)
        created = await service.create_request("Tuition", 500, 1)

        racing = asyncio.gather(
            service.verify_request(created.record_id),
            service.verify_request(created.record_id),
        )
        await _until(lambda: len(decryption.calls) == 2)
        gate.set()
        first, second = await racing

        assert [accepted for _, accepted in ledger.verification_writes].count(True) == 1
        assert sorted([first.already_verified, second.already_verified]) == [False, True]
        assert first.confirmed_value == second.confirmed_value == 500
        kind, _ = _status(service)
        assert kind is StatusKind.SUCCESS

    async def test_wrapped_already_verified_is_success(
        self,
        ledger: LedgerGatewayStub,
        encryption: EncryptionServiceStub,
        fake_time_authority: FakeTimeAuthority,
    ) -> None:
        gate = asyncio.Event()
        decryption = DecryptionVerificationStub(
            encryption, gate=gate, wrap_submit_errors=True
        )
        service = _service_with(ledger, encryption, decryption, fake_time_authority)
        await service.connect(ALICE)
        created = await service.create_request("Tuition", 500, 1)

        task = asyncio.create_task(service.verify_request(created.record_id))
        await _until(lambda: len(decryption.calls) == 1)
        # Another party verifies while this one is decrypting
        stored = ledger.stored(created.record_id)
        stored.verified = True
        stored.revealed_value = 500
        gate.set()
        outcome = await task

        assert outcome.already_verified is True
        assert outcome.confirmed_value == 500
        assert _status(service) == (StatusKind.SUCCESS, MSG_ALREADY_VERIFIED)

    async def test_already_verified_message_is_success(
        self,
        ledger: LedgerGatewayStub,
        encryption: EncryptionServiceStub,
        fake_time_authority: FakeTimeAuthority,
    ) -> None:
        decryption = DecryptionVerificationStub(
            encryption,
            fail_with=RuntimeError("execution reverted: Data already verified"),
        )
        service = _service_with(ledger, encryption, decryption, fake_time_authority)
        ledger.seed_record("request-1", verified=False)
        await service.connect(ALICE)

        outcome = await service.verify_request("request-1")

        assert outcome.already_verified is True
        assert _status(service) == (StatusKind.SUCCESS, MSG_ALREADY_VERIFIED)


class TestVerifyFailures:
    """Tests for verify failures that must surface as errors."""

    async def test_decryption_failure_is_wrapped(
        self,
        connected_service: RequestLifecycleService,
        ledger: LedgerGatewayStub,
    ) -> None:
        # Seeded ciphertext was never produced by the encryption service
        ledger.seed_record("request-1")

        with pytest.raises(DecryptionFailedError) as exc_info:
            await connected_service.verify_request("request-1")

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert ledger.verification_writes == []
        assert _status(connected_service) == (StatusKind.ERROR, MSG_DECRYPTION_FAILED)

    async def test_proof_never_submitted(
        self,
        ledger: LedgerGatewayStub,
        encryption: EncryptionServiceStub,
        fake_time_authority: FakeTimeAuthority,
    ) -> None:
        decryption = DecryptionVerificationStub(encryption, skip_submit=True)
        service = _service_with(ledger, encryption, decryption, fake_time_authority)
        await service.connect(ALICE)
        created = await service.create_request("Tuition", 500, 1)

        with pytest.raises(DecryptionFailedError, match="not submitted"):
            await service.verify_request(created.record_id)

        record = service.state.get(created.record_id)
        assert record is not None
        assert record.verified is False

    async def test_user_rejects_verification(
        self,
        connected_service: RequestLifecycleService,
        ledger: LedgerGatewayStub,
    ) -> None:
        created = await connected_service.create_request("Tuition", 500, 1)
        ledger.reject_next_verification("User rejected transaction", user_declined=True)

        with pytest.raises(LedgerRejectedError):
            await connected_service.verify_request(created.record_id)

        assert _status(connected_service) == (StatusKind.ERROR, MSG_TX_REJECTED)

    async def test_verification_timeout(
        self,
        connected_service: RequestLifecycleService,
        ledger: LedgerGatewayStub,
    ) -> None:
        created = await connected_service.create_request("Tuition", 500, 1)
        ledger.pause_confirmations()

        with pytest.raises(LedgerTimeoutError):
            await connected_service.verify_request(created.record_id)

        assert _status(connected_service) == (StatusKind.ERROR, MSG_DECRYPTION_FAILED)

    async def test_transient_value_never_leaks_into_state(
        self,
        ledger: LedgerGatewayStub,
        encryption: EncryptionServiceStub,
        fake_time_authority: FakeTimeAuthority,
    ) -> None:
        """A decrypted value the ledger rejected is never shown as confirmed."""
        decryption = DecryptionVerificationStub(encryption)
        service = _service_with(ledger, encryption, decryption, fake_time_authority)
        await service.connect(ALICE)
        created = await service.create_request("Tuition", 500, 1)
        ledger.reject_next_verification("invalid decryption proof")

        with pytest.raises(LedgerRejectedError):
            await service.verify_request(created.record_id)

        record = service.state.get(created.record_id)
        assert record is not None
        assert record.confirmed_value is None
