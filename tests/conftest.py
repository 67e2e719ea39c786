from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

import pytest

from driveaudit.models.transaction import TransactionResult

ACCOUNT = "0x627306090abaB3A6e1400e9345bC60c78a8BEf57"
OTHER_ACCOUNT = "0xf17f52151EbEF6C7334FAD080c5704D77216b732"


class FakeContract:
    """In-memory stand-in for the deployed report contract."""

    def __init__(self) -> None:
        self.filed: list[tuple[Any, ...]] = []
        self.reports: Sequence[Any] = (0, [], [], [], [], [], [])
        self.score: Any = 0
        self.error: Exception | None = None
        self.delay: float = 0.0

    async def _maybe_fail(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error

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
        await self._maybe_fail()
        self.filed.append((account, tag_id, plate, state, behavior, latitude, longitude))
        return TransactionResult(tx_hash=f"0x{len(self.filed):064x}", account=account, block_number=len(self.filed))

    async def get_recent_driver_reports(self, tag_id: str) -> Sequence[Any]:
        await self._maybe_fail()
        return self.reports

    async def get_driver_score(self, tag_id: str) -> Any:
        await self._maybe_fail()
        return self.score


class FakeBackend:
    """Provider double counting how often the contract is resolved."""

    def __init__(self, contract: FakeContract | None = None) -> None:
        self.contract = contract or FakeContract()
        self.account_list: list[str] = [ACCOUNT, OTHER_ACCOUNT]
        self.accounts_error: Exception | None = None
        self.deploy_error: Exception | None = None
        self.gate: asyncio.Event | None = None
        self.accounts_calls = 0
        self.deployed_calls = 0

    async def accounts(self) -> list[str]:
        self.accounts_calls += 1
        if self.accounts_error is not None:
            raise self.accounts_error
        return list(self.account_list)

    async def deployed(self) -> FakeContract:
        self.deployed_calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.deploy_error is not None:
            raise self.deploy_error
        return self.contract


@pytest.fixture
def contract() -> FakeContract:
    return FakeContract()


@pytest.fixture
def backend(contract: FakeContract) -> FakeBackend:
    return FakeBackend(contract)
