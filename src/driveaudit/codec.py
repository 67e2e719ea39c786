"""Tag, behaviour-code and coordinate codecs.

Pure helpers shared by the submission and history paths. Coordinates are
stored on the ledger as signed fixed-point integers with five decimal
places (``round(degrees * 1e5)``).
"""

from __future__ import annotations

import enum
from typing import Any

#: Fixed-point scale applied to decimal degrees.
COORDINATE_SCALE = 100_000

#: Number of leading reporter address characters shown in the history table.
REPORTER_PREFIX_LENGTH = 8


class Behavior(enum.IntEnum):
    """Closed set of reportable driving behaviours.

    Codes without a mapped member resolve to ``UNKNOWN`` instead of
    raising ``ValueError``.
    """

    UNKNOWN = -1
    AGGRESSIVE = 1
    SPEEDING = 2
    PROXIMITY = 3
    ERRATIC = 4
    HAZARD = 5

    @classmethod
    def _missing_(cls, value: object) -> Behavior:
        return cls.UNKNOWN

    @property
    def label(self) -> str:
        return self.name.capitalize()


def canonical_tag(state: str, plate: str) -> str:
    """Ledger key for a vehicle: ``state + plate`` verbatim.

    No trimming or case folding is applied; ``("NY", "abc")`` and
    ``("NY", "ABC")`` are different vehicles.
    """
    return state + plate


def display_tag(state: str, plate: str) -> str:
    """Human-readable tag used in the filed-report record line."""
    return f"{state}--{plate}"


def encode_coordinate(degrees: Any) -> int:
    """Decimal degrees to fixed-point integer."""
    return round(float(degrees) * COORDINATE_SCALE)


def decode_coordinate(fixed: Any) -> float:
    """Fixed-point integer to decimal degrees."""
    return int(fixed) / COORDINATE_SCALE


def _format_degrees(value: float) -> str:
    # fixed-point precision, never scientific notation
    return f"{value:.5f}".rstrip("0").rstrip(".")


def format_coordinates(latitude_fixed: Any, longitude_fixed: Any) -> str:
    """Render a fixed-point pair as ``"lat, lng"`` in decimal degrees."""
    lat = decode_coordinate(latitude_fixed)
    lng = decode_coordinate(longitude_fixed)
    return f"{_format_degrees(lat)}, {_format_degrees(lng)}"


def parse_behavior(code: Any) -> Behavior:
    """Map a raw behaviour code to :class:`Behavior` (``UNKNOWN`` if unmapped)."""
    return Behavior(int(code))


def behavior_label(code: Any) -> str:
    return parse_behavior(code).label


def truncate_address(address: str, length: int = REPORTER_PREFIX_LENGTH) -> str:
    """Shorten an account address for table display (``0x12ab34...``)."""
    return f"{address[:length]}..."
