"""Form input and display state.

:class:`ViewState` is the display surface the flows write to: the
account line, the filed-report record line, the history table and the
score indicator. Rendering it (HTML, terminal, ...) is up to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, field_validator

from driveaudit.codec import Behavior, parse_behavior
from driveaudit.models.report import ReportRow
from driveaudit.models.score import DriverScore
from driveaudit.models.tag import Tag


class FormInput(BaseModel):
    """Values of the state, plate and behaviour form fields."""

    model_config = ConfigDict(frozen=True)

    state: str
    plate: str
    behavior: Behavior | None = None

    @field_validator("behavior", mode="before")
    @classmethod
    def _coerce_behavior(cls, value: object) -> Behavior | None:
        if value is None or value == "":
            return None
        return parse_behavior(value)

    @property
    def tag(self) -> Tag:
        return Tag(state=self.state, plate_number=self.plate)

    def require_behavior(self) -> Behavior:
        """The selected behaviour; raises ``ValueError`` if none or unmapped."""
        if self.behavior is None or self.behavior is Behavior.UNKNOWN:
            raise ValueError(f"No valid behaviour selected for {self.state}{self.plate}")
        return self.behavior


@dataclass
class ViewState:
    """Mutable display state shared by the flows."""

    account: str = ""
    record: str = ""
    reports: list[ReportRow] = field(default_factory=list)
    reports_visible: bool = False
    score_text: str = ""
    score_color: str | None = None
    score_visible: bool = False

    def reset(self) -> None:
        """Initial page state: history and score hidden."""
        self.reports_visible = False
        self.score_visible = False

    def hide_score(self) -> None:
        self.score_visible = False

    def show_record(self, text: str) -> None:
        self.record = text

    def show_reports(self, rows: list[ReportRow]) -> None:
        """Replace the whole table and make it (and its title) visible."""
        self.reports = list(rows)
        self.reports_visible = True

    def show_score(self, score: DriverScore) -> None:
        self.score_color = score.color
        self.score_text = f"Driver Score:  {score}"
        self.score_visible = True
