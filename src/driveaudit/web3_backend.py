"""web3.py backend for :class:`driveaudit.ledger.LedgerClient`.

Talks JSON-RPC to the ledger node through ``AsyncWeb3`` and shares the
client's aiohttp session with the provider.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from driveaudit._artifact import load_artifact
from driveaudit.config import DriveAuditConfig
from driveaudit.exceptions import (
    ArtifactError,
    LedgerNetworkError,
    LedgerUnavailableError,
    TransactionRejectedError,
)
from driveaudit.models.transaction import TransactionResult

_logger = logging.getLogger(__name__)

# web3 v6 surfaces JSON-RPC errors as plain ValueError; v7 as Web3Exception subclasses.
_RPC_ERRORS = (Web3Exception, ValueError)


class Web3ReportContract:
    """Deployed report contract reached through web3.py."""

    def __init__(self, w3: AsyncWeb3, contract: Any, *, receipt_timeout: float) -> None:
        self._w3 = w3
        self._contract = contract
        self._receipt_timeout = receipt_timeout

    @property
    def address(self) -> str:
        return str(self._contract.address)

    async def file_report(
        self,
        account: str,
        tag_id: str,
        plate: str,
        state: str,
        behavior: int,
        latitude: int,
        longitude: int,
    ) -> TransactionResult:
        fn = self._contract.functions.fileReport(tag_id, plate, state, behavior, latitude, longitude)
        try:
            tx_hash = await fn.transact({"from": account})
        except ContractLogicError as exc:
            raise TransactionRejectedError(f"fileReport reverted: {exc}") from exc
        except _RPC_ERRORS as exc:
            raise TransactionRejectedError(f"fileReport rejected: {exc}") from exc

        hex_hash = AsyncWeb3.to_hex(tx_hash)
        _logger.debug("fileReport sent tx=%s, waiting for receipt", hex_hash)
        try:
            receipt = await self._w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self._receipt_timeout)
        except TimeExhausted as exc:
            raise LedgerNetworkError(
                f"Transaction {hex_hash} not mined within {self._receipt_timeout}s",
                operation="fileReport",
            ) from exc
        except _RPC_ERRORS as exc:
            raise LedgerNetworkError(
                f"Waiting for receipt of {hex_hash} failed: {exc}",
                operation="fileReport",
            ) from exc

        if receipt.get("status") == 0:
            raise TransactionRejectedError(f"Transaction {hex_hash} reverted", tx_hash=hex_hash)
        return TransactionResult(
            tx_hash=hex_hash,
            account=account,
            block_number=receipt.get("blockNumber"),
            status=receipt.get("status"),
        )

    async def _read(self, name: str, fn: Any) -> Any:
        try:
            return await fn.call()
        except _RPC_ERRORS as exc:
            raise LedgerNetworkError(f"{name} failed: {exc}", operation=name) from exc

    async def get_recent_driver_reports(self, tag_id: str) -> Sequence[Any]:
        return await self._read(
            "getRecentDriverReports",
            self._contract.functions.getRecentDriverReports(tag_id),
        )

    async def get_driver_score(self, tag_id: str) -> Any:
        return await self._read("getDriverScore", self._contract.functions.getDriverScore(tag_id))


class Web3LedgerBackend:
    """Provider capability backed by a JSON-RPC node."""

    def __init__(self, config: DriveAuditConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._provider = AsyncHTTPProvider(config.provider_url)
        self._w3 = AsyncWeb3(self._provider)
        self._session_cached = False

    async def _web3(self) -> AsyncWeb3:
        if not self._session_cached:
            await self._provider.cache_async_session(self._http)
            self._session_cached = True
        return self._w3

    async def accounts(self) -> list[str]:
        w3 = await self._web3()
        try:
            return list(await w3.eth.accounts)
        except _RPC_ERRORS as exc:
            raise LedgerUnavailableError(f"Provider did not return accounts: {exc}") from exc

    async def _network_id(self, w3: AsyncWeb3) -> str:
        if self._config.network_id:
            return self._config.network_id
        try:
            return str(await w3.net.version)
        except _RPC_ERRORS as exc:
            raise LedgerUnavailableError(f"Cannot determine network id: {exc}") from exc

    async def deployed(self) -> Web3ReportContract:
        """Resolve the deployed contract for the node's network."""
        w3 = await self._web3()
        artifact = await load_artifact(self._config.artifact, self._http)
        network_id = await self._network_id(w3)
        raw_address = artifact.address_for(network_id)
        try:
            address = AsyncWeb3.to_checksum_address(raw_address)
        except ValueError as exc:
            raise ArtifactError(f"Invalid deployed address {raw_address!r}") from exc
        try:
            code = await w3.eth.get_code(address)
        except _RPC_ERRORS as exc:
            raise LedgerUnavailableError(f"Cannot inspect contract at {address}: {exc}") from exc
        if not code:
            raise LedgerUnavailableError(f"No contract code at {address} on network {network_id}")
        try:
            contract = w3.eth.contract(address=address, abi=artifact.abi)
        except _RPC_ERRORS as exc:
            raise ArtifactError(f"Invalid ABI for contract at {address}: {exc}") from exc
        _logger.info("Using %s at %s (network %s)", artifact.contract_name or "contract", address, network_id)
        return Web3ReportContract(w3, contract, receipt_timeout=self._config.receipt_timeout)
