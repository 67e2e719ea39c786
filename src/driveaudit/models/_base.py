"""Base model and timestamp helpers for ledger-backed records.

Every record model inherits from :class:`LedgerModel` (frozen pydantic
model).
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def parse_ledger_timestamp(value: Any) -> datetime | None:
    """Convert a ledger epoch timestamp (seconds **or** milliseconds) to a UTC datetime.

    Returns ``None`` when the value is ``None``.
    """
    if value is None:
        return value
    if isinstance(value, datetime):
        return value
    ts = int(value)
    if ts >= _MS_THRESHOLD:
        ts = ts // 1000
    try:
        return datetime.fromtimestamp(ts, tz=UTC)
    except (OverflowError, OSError, ValueError) as exc:
        raise ValueError(f"Timestamp out of range: {value}") from exc


LedgerTimestamp = Annotated[datetime | None, BeforeValidator(parse_ledger_timestamp)]
"""Annotated type that coerces ledger epoch ints (seconds or ms) to UTC datetimes."""


class LedgerModel(BaseModel):
    """Base for immutable records exchanged with the ledger."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
