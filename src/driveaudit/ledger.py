"""Ledger client: one cached contract instance, three operations.

:class:`LedgerClient` talks to the ledger through the small
:class:`LedgerBackend` capability interface so flows can be exercised
against in-memory doubles. The production backend lives in
:mod:`driveaudit.web3_backend`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol, TypeVar

import aiohttp
from pydantic import ValidationError

from driveaudit.exceptions import DriveAuditError, LedgerNetworkError, LedgerUnavailableError
from driveaudit.models.report import ReportBatch
from driveaudit.models.score import DriverScore
from driveaudit.models.tag import Tag
from driveaudit.models.transaction import TransactionResult

_logger = logging.getLogger(__name__)

T = TypeVar("T")

#: Coordinate written when no position fix is available. The ledger has no
#: "absent" encoding, so a missing fix is indistinguishable from (0, 0) on-chain.
MISSING_COORDINATE_SENTINEL = 0


class LedgerContract(Protocol):
    """A resolved, deployed contract instance."""

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
        ...

    async def get_recent_driver_reports(self, tag_id: str) -> Sequence[Any]:
        ...

    async def get_driver_score(self, tag_id: str) -> Any:
        ...


class LedgerBackend(Protocol):
    """Provider/wallet capability: accounts plus deployed-contract resolution."""

    async def accounts(self) -> list[str]:
        ...

    async def deployed(self) -> LedgerContract:
        ...


class LedgerClient:
    """Async handle to the report contract.

    The contract instance is resolved lazily on first use and cached.
    Callers that arrive while the first resolution is still in flight
    share it instead of starting another one. A failed resolution is not
    cached; the next call retries.

    Usage::

        client = LedgerClient(backend)
        batch = await client.get_recent_driver_reports(Tag(state="NY", plate_number="ABC123"))
    """

    def __init__(self, backend: LedgerBackend, *, call_timeout: float | None = None) -> None:
        self._backend = backend
        self._call_timeout = call_timeout
        self._contract: LedgerContract | None = None
        self._resolving: asyncio.Task[LedgerContract] | None = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _call(self, operation: str, fn: Callable[[], Awaitable[T]]) -> T:
        """Run one ledger round trip, mapping transport failures to :class:`LedgerNetworkError`."""
        try:
            if self._call_timeout is None:
                return await fn()
            return await asyncio.wait_for(fn(), self._call_timeout)
        except DriveAuditError:
            raise
        except TimeoutError as exc:
            raise LedgerNetworkError(
                f"{operation} timed out after {self._call_timeout}s",
                operation=operation,
            ) from exc
        except (aiohttp.ClientError, OSError) as exc:
            raise LedgerNetworkError(f"{operation} failed: {exc}", operation=operation) from exc

    async def _resolve(self) -> LedgerContract:
        _logger.debug("Resolving deployed contract")
        return await self._call("deployed", self._backend.deployed)

    async def contract(self) -> LedgerContract:
        """Return the deployed contract, resolving it at most once at a time."""
        if self._contract is not None:
            return self._contract
        if self._resolving is None:
            self._resolving = asyncio.get_running_loop().create_task(self._resolve())
        task = self._resolving
        try:
            contract = await asyncio.shield(task)
        except BaseException:
            if task.done() and self._resolving is task:
                self._resolving = None
            raise
        self._contract = contract
        self._resolving = None
        return contract

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def resolve_account(self) -> str:
        """Active account of the wallet/provider (its first account)."""
        accounts = await self._call("getAccounts", self._backend.accounts)
        if not accounts:
            raise LedgerUnavailableError("No account available from the provider")
        return accounts[0]

    async def file_report(
        self,
        tag: Tag,
        behavior: int,
        latitude_fixed: int | None,
        longitude_fixed: int | None,
        *,
        account: str | None = None,
    ) -> TransactionResult:
        """File a report against *tag*, attributed to *account*.

        *account* defaults to the provider's active account. Missing
        coordinates are written as :data:`MISSING_COORDINATE_SENTINEL`.

        Raises
        ------
        LedgerUnavailableError
            No provider, account or deployed contract.
        TransactionRejectedError
            The ledger declined the transaction.
        LedgerNetworkError
            Transport failure.
        """
        if account is None:
            account = await self.resolve_account()
        if latitude_fixed is None or longitude_fixed is None:
            _logger.warning("No position fix for report on %s; filing without coordinates", tag.tag_id)
            latitude_fixed = longitude_fixed = MISSING_COORDINATE_SENTINEL
        contract = await self.contract()
        _logger.debug(
            "fileReport tag=%s behavior=%s coords=%s,%s account=%s",
            tag.tag_id,
            behavior,
            latitude_fixed,
            longitude_fixed,
            account,
        )
        return await self._call(
            "fileReport",
            lambda: contract.file_report(
                account,
                tag.tag_id,
                tag.plate_number,
                tag.state,
                int(behavior),
                latitude_fixed,
                longitude_fixed,
            ),
        )

    async def get_recent_driver_reports(self, tag: Tag) -> ReportBatch:
        """Fetch the aligned report arrays for *tag* (never a partial result)."""
        contract = await self.contract()
        raw = await self._call(
            "getRecentDriverReports",
            lambda: contract.get_recent_driver_reports(tag.tag_id),
        )
        try:
            batch = ReportBatch.from_call_result(raw)
        except (ValidationError, ValueError, TypeError) as exc:
            raise LedgerNetworkError(
                f"Malformed getRecentDriverReports reply: {exc}",
                operation="getRecentDriverReports",
            ) from exc
        _logger.debug("Num Reports: %d", batch.count)
        return batch

    async def get_driver_score(self, tag: Tag) -> DriverScore:
        """Fetch the ledger-computed score for *tag*."""
        contract = await self.contract()
        raw = await self._call("getDriverScore", lambda: contract.get_driver_score(tag.tag_id))
        try:
            score = DriverScore(value=raw)
        except ValidationError as exc:
            raise LedgerNetworkError(
                f"Malformed getDriverScore reply: {raw!r}",
                operation="getDriverScore",
            ) from exc
        _logger.debug("Driver Score: %s", score)
        return score
