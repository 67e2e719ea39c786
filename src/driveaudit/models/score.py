"""Driver score model and severity banding."""

from __future__ import annotations

import math
from enum import StrEnum
from typing import Any

from pydantic import field_validator

from driveaudit.models._base import LedgerModel

#: Scores below this are ``low``.
MEDIUM_THRESHOLD = 20
#: Scores at or above this are ``high``.
HIGH_THRESHOLD = 50


class SeverityBand(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def color(self) -> str:
        return _BAND_COLORS[self]


_BAND_COLORS: dict[SeverityBand, str] = {
    SeverityBand.LOW: "green",
    SeverityBand.MEDIUM: "orange",
    SeverityBand.HIGH: "red",
}


def classify_score(value: float) -> SeverityBand:
    """Band a score: ``<20`` low, ``[20, 50)`` medium, ``>=50`` high."""
    if value < MEDIUM_THRESHOLD:
        return SeverityBand.LOW
    if value < HIGH_THRESHOLD:
        return SeverityBand.MEDIUM
    return SeverityBand.HIGH


class DriverScore(LedgerModel):
    """Numeric score computed by the ledger for a tag."""

    value: int | float

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> int | float:
        if isinstance(value, bool):
            raise ValueError("score must be numeric")
        if isinstance(value, int):
            return value
        try:
            number = float(value)
        except TypeError as exc:
            raise ValueError(f"score must be numeric, got {value!r}") from exc
        if math.isnan(number):
            raise ValueError("score must not be NaN")
        return number

    @property
    def band(self) -> SeverityBand:
        return classify_score(self.value)

    @property
    def color(self) -> str:
        return self.band.color

    def __str__(self) -> str:
        if isinstance(self.value, float) and self.value.is_integer():
            return str(int(self.value))
        return str(self.value)
