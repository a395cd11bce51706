"""Unit tests for request lifecycle bootstrap wiring."""

import os
from collections.abc import Iterator
from unittest.mock import patch

import pytest

from confidential_aid.bootstrap.lifecycle import (
    get_ledger_gateway,
    get_request_lifecycle_service,
    reset_lifecycle_dependencies,
    set_ledger_gateway,
    set_time_authority,
)
from confidential_aid.infrastructure.adapters.ledger import HttpLedgerGateway
from confidential_aid.infrastructure.stubs import LedgerGatewayStub
from tests.helpers import ALICE, FakeTimeAuthority


@pytest.fixture(autouse=True)
def reset_singletons() -> Iterator[None]:
    reset_lifecycle_dependencies()
    yield
    reset_lifecycle_dependencies()


class TestLedgerSelection:
    def test_stub_without_url(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert isinstance(get_ledger_gateway(), LedgerGatewayStub)

    def test_http_with_url(self) -> None:
        with patch.dict(os.environ, {"AID_LEDGER_URL": "http://relay.test"}):
            assert isinstance(get_ledger_gateway(), HttpLedgerGateway)


class TestServiceWiring:
    def test_singleton(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert get_request_lifecycle_service() is get_request_lifecycle_service()

    async def test_wired_service_runs_create(self) -> None:
        ledger = LedgerGatewayStub()
        set_ledger_gateway(ledger)
        set_time_authority(FakeTimeAuthority())

        service = get_request_lifecycle_service()
        await service.connect(ALICE)
        result = await service.create_request("Tuition", 500, 1)

        assert ledger.created_ids == [result.record_id]
