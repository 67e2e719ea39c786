"""Filed-report transaction model."""

from __future__ import annotations

from pydantic import Field

from driveaudit.models._base import LedgerModel


class TransactionResult(LedgerModel):
    """Outcome of a mined ``fileReport`` transaction.

    Parameters
    ----------
    tx_hash : str
        Transaction identifier (``0x``-prefixed hex).
    account : str
        Account the report was attributed to.
    block_number : int or None
        Block that included the transaction, when the backend reports it.
    status : int or None
        Receipt status (1 for success), when the backend reports it.
    """

    tx_hash: str
    account: str
    block_number: int | None = Field(default=None)
    status: int | None = Field(default=None)
