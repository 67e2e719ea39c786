"""Vehicle tag model."""

from __future__ import annotations

from pydantic import Field

from driveaudit.codec import canonical_tag, display_tag
from driveaudit.models._base import LedgerModel


class Tag(LedgerModel):
    """State + plate number pair identifying a vehicle on the ledger.

    Values are kept exactly as entered; see :func:`driveaudit.codec.canonical_tag`.
    """

    state: str = Field(..., description="Issuing state, e.g. ``NY``")
    plate_number: str = Field(..., description="Plate number as entered")

    @property
    def tag_id(self) -> str:
        return canonical_tag(self.state, self.plate_number)

    @property
    def display(self) -> str:
        return display_tag(self.state, self.plate_number)
