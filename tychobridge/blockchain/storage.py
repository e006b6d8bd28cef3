"""
Remote Blockchain Storage

Fetch account states from a JSON-RPC node and cache them per address.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from tychobridge.blockchain.models import (
    ContractState,
    ContractStateExists,
    ContractStateResult,
    JrpcResponse,
)
from tychobridge.executor.codec import decode_big
from tychobridge.utils.exceptions import ProtocolError, RemoteLookupError, ValidationError, sanitize_error_message

if TYPE_CHECKING:
    from tychobridge.config.schema import BridgeSettings


@dataclass
class RemoteAccount:
    """Account snapshot used to seed a sandbox contract."""
    address: str
    exists: bool
    account: str | None  # base64 BOC of the account cell
    last_transaction_lt: int
    last_transaction_hash: bytes
    gen_lt: int
    gen_utime: int


class JrpcClient:
    """Minimal async JSON-RPC client for contract state lookups."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the client.

        Args:
            url: JSON-RPC endpoint
            timeout: Request timeout in seconds
            client: Optional pre-built HTTP client (owned by the caller)
        """
        self.url = url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close HTTP client"""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def call(self, method: str, params: dict[str, Any]) -> Any:
        client = await self._get_client()
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": params,
        }
        resp = await client.post(self.url, json=payload)
        if resp.status_code != 200:
            logger.error("RPC {} failed with HTTP {}: {}", method, resp.status_code, sanitize_error_message(resp.text[:200]))
            raise RemoteLookupError(
                f"{method} failed: HTTP {resp.status_code} {resp.reason_phrase}",
                status_code=resp.status_code,
            )
        try:
            envelope = JrpcResponse.model_validate(resp.json())
        except (ValueError, PydanticValidationError) as exc:
            raise RemoteLookupError(f"{method} returned a malformed response: {exc}") from exc
        if envelope.result is None:
            logger.error("RPC {} error: {}", method, sanitize_error_message(str(envelope.error)))
            raise RemoteLookupError(f"{method} returned an error: {envelope.error}")
        return envelope.result

    async def get_contract_state(self, address: str) -> ContractState:
        result = await self.call("getContractState", {"address": address})
        try:
            return ContractStateResult.model_validate({"state": result}).state
        except PydanticValidationError as exc:
            raise RemoteLookupError(f"unknown account state for {address}: {exc}", address=address) from exc


class RemoteBlockchainStorage:
    """Caches remote account snapshots fetched through :class:`JrpcClient`."""

    def __init__(self, url: str, timeout: float = 10.0, client: httpx.AsyncClient | None = None):
        self.client = JrpcClient(url, timeout=timeout, client=client)
        self._contracts: dict[str, RemoteAccount] = {}

    @classmethod
    async def create(
        cls,
        *,
        settings: BridgeSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> RemoteBlockchainStorage:
        """Build storage for the configured ``rpc.url`` and ``rpc.timeout``."""
        if settings is None:
            from tychobridge.config import get_config

            settings = get_config()
        url = settings.rpc.url.strip()
        if not url:
            raise ValidationError("rpc.url is not configured", field="rpc.url")
        logger.debug("Using account-state RPC at {} (timeout={}s)", url, settings.rpc.timeout)
        return cls(url, timeout=settings.rpc.timeout, client=client)

    async def get_contract(self, address: str) -> RemoteAccount:
        existing = self._contracts.get(address)
        if existing is None:
            state = await self.client.get_contract_state(address)
            existing = _to_remote_account(address, state)
            self._contracts[address] = existing
        return existing

    def known_contracts(self) -> list[RemoteAccount]:
        return list(self._contracts.values())

    def clear_known_contracts(self) -> None:
        self._contracts.clear()

    async def close(self) -> None:
        await self.client.close()


def _to_remote_account(address: str, state: ContractState) -> RemoteAccount:
    try:
        gen_lt = decode_big(state.timings.gen_lt, "genLt")
        if isinstance(state, ContractStateExists):
            last = state.last_transaction_id
            return RemoteAccount(
                address=address,
                exists=True,
                account=state.account,
                last_transaction_lt=decode_big(last.lt, "lastTransactionId.lt"),
                last_transaction_hash=bytes.fromhex(last.hash),
                gen_lt=gen_lt,
                gen_utime=state.timings.gen_utime,
            )
    except (ProtocolError, ValueError) as exc:
        raise RemoteLookupError(f"invalid account state for {address}: {exc}", address=address) from exc
    return RemoteAccount(
        address=address,
        exists=False,
        account=None,
        last_transaction_lt=0,
        last_transaction_hash=bytes(32),
        gen_lt=gen_lt,
        gen_utime=state.timings.gen_utime,
    )
