"""HTTP ledger gateway.

LedgerGatewayProtocol implementation talking to a JSON ledger relay, the
service that holds the contract binding and broadcasts signed writes.

Relay API:
    GET  /records                       -> {"ids": [...]}
    GET  /records/{id}                  -> record fields
    GET  /records/{id}/ciphertext       -> {"handle": "0x..."}
    GET  /health                        -> {"available": bool}
    GET  /context                       -> {"contract_address": "0x..."}
    POST /records                       -> {"tx_hash": "0x..."}
    POST /records/{id}/verification     -> {"tx_hash": "0x..."}
    GET  /transactions/{tx_hash}        -> {"status": "pending|included|reverted", "reason": ...}

Error translation:
- transport errors and 5xx             -> LedgerUnreachableError
- 404                                  -> RecordNotFoundError
- code "already_verified"              -> AlreadyVerifiedError
- code "duplicate_id"                  -> RecordIdCollisionError
- other 4xx on writes                  -> LedgerRejectedError
"""

from __future__ import annotations

import asyncio
from typing import Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from confidential_aid.config.lifecycle_config import LedgerHttpConfig
from confidential_aid.domain.errors import (
    AidRequestError,
    AlreadyVerifiedError,
    LedgerRejectedError,
    LedgerUnreachableError,
    RecordIdCollisionError,
    RecordNotFoundError,
)
from confidential_aid.infrastructure.adapters.ledger.models import (
    BroadcastResponse,
    CiphertextHandleResponse,
    ContextResponse,
    CreateRecordBody,
    HealthResponse,
    RecordIdsResponse,
    RecordPayload,
    RelayError,
    RelayErrorCode,
    TransactionReceipt,
    TransactionStatus,
    VerificationBody,
)

log = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


def _hex(data: bytes) -> str:
    return "0x" + data.hex()


class HttpLedgerTransaction:
    """A write broadcast through the relay, awaiting inclusion by polling."""

    def __init__(self, gateway: HttpLedgerGateway, tx_ref: str) -> None:
        self.tx_ref = tx_ref
        self._gateway = gateway

    async def wait(self) -> None:
        """Poll the relay until the transaction is included or reverted.

        Raises:
            LedgerRejectedError: If the transaction reverted.
            LedgerUnreachableError: If the relay cannot be reached.
        """
        while True:
            receipt = await self._gateway.get_receipt(self.tx_ref)
            if receipt.status is TransactionStatus.INCLUDED:
                return
            if receipt.status is TransactionStatus.REVERTED:
                raise LedgerRejectedError(receipt.reason or "transaction reverted")
            await asyncio.sleep(self._gateway.poll_interval)


class HttpLedgerGateway:
    """Ledger gateway backed by the relay HTTP API.

    Usage:
        async with HttpLedgerGateway(LedgerHttpConfig(base_url=url)) as ledger:
            ids = await ledger.list_record_ids()
    """

    def __init__(
        self,
        config: LedgerHttpConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            config: Relay connection settings; base_url is required.
            client: Optional preconfigured client (tests pass one with a
                mock transport). The gateway only closes clients it created.

        Raises:
            ValueError: If config.base_url is not set.
        """
        if not config.base_url:
            raise ValueError("HttpLedgerGateway requires a base_url")
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
        )

    @property
    def poll_interval(self) -> float:
        return self._config.poll_interval_seconds

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpLedgerGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # =========================================================================
    # Read surface
    # =========================================================================

    async def list_record_ids(self) -> list[str]:
        body = await self._get("/records", RecordIdsResponse)
        return body.ids

    async def get_record(self, record_id: str) -> dict[str, Any]:
        body = await self._get(f"/records/{record_id}", RecordPayload, record_id)
        return body.model_dump()

    async def get_ciphertext_handle(self, record_id: str) -> str:
        body = await self._get(
            f"/records/{record_id}/ciphertext", CiphertextHandleResponse, record_id
        )
        return body.handle

    async def is_available(self) -> bool:
        body = await self._get("/health", HealthResponse)
        return body.available

    async def get_target_context(self) -> str:
        body = await self._get("/context", ContextResponse)
        return body.contract_address

    async def get_receipt(self, tx_ref: str) -> TransactionReceipt:
        return await self._get(f"/transactions/{tx_ref}", TransactionReceipt)

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
    ) -> HttpLedgerTransaction:
        body = CreateRecordBody(
            id=record_id,
            title=title,
            ciphertext=_hex(ciphertext),
            proof=_hex(proof),
            category=category,
            secondary_value=secondary_value,
            purpose_label=purpose_label,
            sender=sender,
        )
        return await self._broadcast("/records", body, record_id)

    async def submit_verification(
        self,
        record_id: str,
        encoded_clear_values: bytes,
        proof: bytes,
        sender: str,
    ) -> HttpLedgerTransaction:
        body = VerificationBody(
            encoded_clear_values=_hex(encoded_clear_values),
            proof=_hex(proof),
            sender=sender,
        )
        return await self._broadcast(
            f"/records/{record_id}/verification", body, record_id
        )

    # =========================================================================
    # Transport
    # =========================================================================

    async def _get(
        self, path: str, model: type[ModelT], record_id: str | None = None
    ) -> ModelT:
        response = await self._send("GET", path)
        if response.status_code >= 400:
            raise self._read_error(response, record_id)
        return self._parse(response, model)

    async def _broadcast(
        self, path: str, body: BaseModel, record_id: str
    ) -> HttpLedgerTransaction:
        response = await self._send("POST", path, json=body.model_dump())
        if response.status_code >= 400:
            raise self._write_error(response, record_id)
        broadcast = self._parse(response, BroadcastResponse)
        log.debug("ledger_write_broadcast", path=path, tx_ref=broadcast.tx_hash)
        return HttpLedgerTransaction(self, broadcast.tx_hash)

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log.warning("ledger_relay_unreachable", method=method, path=path, error=str(e))
            raise LedgerUnreachableError(f"{method} {path} failed: {e}") from e

    @staticmethod
    def _parse(response: httpx.Response, model: type[ModelT]) -> ModelT:
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise LedgerUnreachableError(
                f"Malformed relay response for {response.request.url.path}: {e}"
            ) from e

    @staticmethod
    def _relay_error(response: httpx.Response) -> RelayError:
        try:
            return RelayError.model_validate(response.json())
        except (ValueError, ValidationError):
            return RelayError(error=response.text)

    def _read_error(
        self, response: httpx.Response, record_id: str | None
    ) -> AidRequestError:
        if response.status_code == 404 and record_id is not None:
            return RecordNotFoundError(record_id)
        error = self._relay_error(response)
        return LedgerUnreachableError(
            f"Relay returned {response.status_code}: {error.error or 'no detail'}"
        )

    def _write_error(self, response: httpx.Response, record_id: str) -> AidRequestError:
        error = self._relay_error(response)
        if response.status_code >= 500:
            return LedgerUnreachableError(
                f"Relay returned {response.status_code}: {error.error or 'no detail'}"
            )
        if error.code is RelayErrorCode.ALREADY_VERIFIED:
            return AlreadyVerifiedError(record_id)
        if error.code is RelayErrorCode.DUPLICATE_ID:
            return RecordIdCollisionError(record_id)
        if response.status_code == 404 or error.code is RelayErrorCode.NOT_FOUND:
            return RecordNotFoundError(record_id)
        return LedgerRejectedError(
            error.error or f"rejected with status {response.status_code}",
            user_declined=error.code is RelayErrorCode.USER_REJECTED,
        )
