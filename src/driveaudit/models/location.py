"""Device position model."""

from __future__ import annotations

from driveaudit.codec import decode_coordinate, encode_coordinate, format_coordinates
from driveaudit.models._base import LedgerModel


class GeoFix(LedgerModel):
    """A device position, fixed-point encoded (degrees * 1e5)."""

    latitude_fixed: int
    longitude_fixed: int

    @classmethod
    def from_degrees(cls, latitude: float, longitude: float) -> GeoFix:
        return cls(
            latitude_fixed=encode_coordinate(latitude),
            longitude_fixed=encode_coordinate(longitude),
        )

    @property
    def latitude(self) -> float:
        return decode_coordinate(self.latitude_fixed)

    @property
    def longitude(self) -> float:
        return decode_coordinate(self.longitude_fixed)

    def __str__(self) -> str:
        return format_coordinates(self.latitude_fixed, self.longitude_fixed)
