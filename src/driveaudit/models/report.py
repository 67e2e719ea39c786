"""Report history models.

``getRecentDriverReports`` returns seven values: a report count followed by
six index-aligned arrays. Slots whose valid flag is zero are padding and
never surface as records.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import Field, field_validator, model_validator

from driveaudit.codec import Behavior, format_coordinates, parse_behavior, truncate_address
from driveaudit.models._base import LedgerModel, LedgerTimestamp

_ALIGNED_FIELDS: tuple[str, ...] = (
    "valid_flags",
    "reporters",
    "behaviors",
    "timestamps",
    "latitudes",
    "longitudes",
)


class ReportRecord(LedgerModel):
    """One filed report as stored on the ledger.

    Parameters
    ----------
    index : int
        Position of the report in the ledger response.
    marker : int
        Valid-flag value of the slot (always > 0 for a record).
    reporter : str
        Address of the account that filed the report.
    behavior : Behavior
        Reported behaviour (``UNKNOWN`` for unmapped codes).
    timestamp : int
        Epoch seconds at which the report was filed.
    latitude_fixed, longitude_fixed : int
        Fixed-point coordinates (degrees * 1e5).
    """

    index: int
    marker: int
    reporter: str
    behavior: Behavior
    timestamp: int
    latitude_fixed: int
    longitude_fixed: int

    @field_validator("behavior", mode="before")
    @classmethod
    def _coerce_behavior(cls, value: Any) -> Behavior:
        return parse_behavior(value)

    def to_row(self) -> ReportRow:
        return ReportRow(
            index=self.index,
            marker=self.marker,
            behavior_label=self.behavior.label,
            coordinates=format_coordinates(self.latitude_fixed, self.longitude_fixed),
            reporter=truncate_address(self.reporter),
            timestamp=self.timestamp,
        )


class ReportRow(LedgerModel):
    """A report rendered for the history table."""

    index: int
    marker: int
    behavior_label: str
    coordinates: str
    reporter: str
    timestamp: LedgerTimestamp = None

    def cells(self) -> tuple[str, str, str, str, str]:
        """Table cells in column order: marker, behaviour, coordinates, reporter, time."""
        when = self.timestamp.strftime("%Y-%m-%d %H:%M:%S UTC") if self.timestamp else ""
        return (str(self.marker), self.behavior_label, self.coordinates, self.reporter, when)


class ReportBatch(LedgerModel):
    """The aligned tuple returned by ``getRecentDriverReports``."""

    count: int = Field(..., ge=0)
    valid_flags: list[int]
    reporters: list[str]
    behaviors: list[int]
    timestamps: list[int]
    latitudes: list[int]
    longitudes: list[int]

    @classmethod
    def from_call_result(cls, result: Sequence[Any]) -> ReportBatch:
        """Build a batch from the raw seven-element contract return value."""
        if len(result) != 1 + len(_ALIGNED_FIELDS):
            raise ValueError(f"expected {1 + len(_ALIGNED_FIELDS)} values, got {len(result)}")
        values: dict[str, Any] = {"count": result[0]}
        for name, array in zip(_ALIGNED_FIELDS, result[1:], strict=True):
            values[name] = list(array)
        return cls.model_validate(values)

    @model_validator(mode="after")
    def _check_alignment(self) -> ReportBatch:
        for name in _ALIGNED_FIELDS:
            length = len(getattr(self, name))
            if length < self.count:
                raise ValueError(f"{name} has {length} entries, fewer than count={self.count}")
        return self

    def records(self) -> list[ReportRecord]:
        """Records for every valid slot, in ascending index order."""
        return [
            ReportRecord(
                index=i,
                marker=self.valid_flags[i],
                reporter=self.reporters[i],
                behavior=self.behaviors[i],
                timestamp=self.timestamps[i],
                latitude_fixed=self.latitudes[i],
                longitude_fixed=self.longitudes[i],
            )
            for i in range(self.count)
            if self.valid_flags[i] > 0
        ]

    def rows(self) -> list[ReportRow]:
        return [record.to_row() for record in self.records()]
