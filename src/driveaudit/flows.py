"""User-triggered workflows: file a report, show history, show score.

Each flow is a small state machine around one or two ledger round trips.
Errors never leave a flow: they are logged, the flow ends in
:attr:`FlowState.FAILED` and the view is left as it was before the run.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from driveaudit.exceptions import DriveAuditError
from driveaudit.geolocation import SessionLocation
from driveaudit.ledger import LedgerClient
from driveaudit.models.report import ReportRow
from driveaudit.models.score import DriverScore
from driveaudit.models.transaction import TransactionResult
from driveaudit.view import FormInput, ViewState

_logger = logging.getLogger(__name__)


class FlowState(StrEnum):
    IDLE = "idle"
    ACCOUNT_RESOLVING = "account_resolving"
    SUBMITTING = "submitting"
    FETCHING = "fetching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def format_record(tag_display: str, result: TransactionResult) -> str:
    """Record line shown after a report is filed."""
    return f"Tag {tag_display} was filed by user {result.account} TransactionID={result.tx_hash}"


class _Flow:
    def __init__(self, ledger: LedgerClient, view: ViewState) -> None:
        self._ledger = ledger
        self._view = view
        self.state = FlowState.IDLE
        self.last_error: Exception | None = None

    def _begin(self, state: FlowState) -> None:
        self.state = state
        self.last_error = None

    def _fail(self, what: str, exc: Exception) -> FlowState:
        _logger.warning("%s failed: %s", what, exc)
        self.last_error = exc
        self.state = FlowState.FAILED
        return self.state


class ReportSubmissionFlow(_Flow):
    """File a report for the tag in the form.

    ``IDLE -> ACCOUNT_RESOLVING -> SUBMITTING -> SUCCEEDED | FAILED``.
    There is no retry; a failed submission needs a new trigger.
    """

    def __init__(self, ledger: LedgerClient, view: ViewState, location: SessionLocation) -> None:
        super().__init__(ledger, view)
        self._location = location
        self.result: TransactionResult | None = None

    async def run(self, form: FormInput) -> FlowState:
        # A score from an earlier query must not linger during a new submission.
        self._view.hide_score()

        self._begin(FlowState.ACCOUNT_RESOLVING)
        try:
            account = await self._ledger.resolve_account()
        except DriveAuditError as exc:
            return self._fail("Account resolution", exc)

        self.state = FlowState.SUBMITTING
        try:
            behavior = form.require_behavior()
            tag = form.tag
            fix = self._location.fix
            if fix is not None:
                _logger.debug("Determined Coords: %s,%s", fix.latitude_fixed, fix.longitude_fixed)
            result = await self._ledger.file_report(
                tag,
                behavior,
                fix.latitude_fixed if fix is not None else None,
                fix.longitude_fixed if fix is not None else None,
                account=account,
            )
        except (DriveAuditError, ValueError) as exc:
            return self._fail("Report submission", exc)

        self.result = result
        self._view.show_record(format_record(tag.display, result))
        _logger.info("Report on %s filed by %s in %s", tag.tag_id, account, result.tx_hash)
        self.state = FlowState.SUCCEEDED
        return self.state


class ReportHistoryFlow(_Flow):
    """Fetch and render the report history of the tag in the form."""

    def __init__(self, ledger: LedgerClient, view: ViewState) -> None:
        super().__init__(ledger, view)
        self.rows: list[ReportRow] = []

    async def run(self, form: FormInput) -> FlowState:
        self._begin(FlowState.FETCHING)
        try:
            batch = await self._ledger.get_recent_driver_reports(form.tag)
            rows = batch.rows()
        except (DriveAuditError, ValueError) as exc:
            return self._fail("Report history", exc)

        self.rows = rows
        self._view.show_reports(rows)
        self.state = FlowState.SUCCEEDED
        return self.state


class ScoreFlow(_Flow):
    """Fetch the score of the tag in the form and show its severity band."""

    def __init__(self, ledger: LedgerClient, view: ViewState) -> None:
        super().__init__(ledger, view)
        self.score: DriverScore | None = None

    async def run(self, form: FormInput) -> FlowState:
        self._begin(FlowState.FETCHING)
        try:
            score = await self._ledger.get_driver_score(form.tag)
        except (DriveAuditError, ValueError) as exc:
            return self._fail("Driver score", exc)

        self.score = score
        _logger.info("Driver Score: %s (%s)", score, score.band)
        self._view.show_score(score)
        self.state = FlowState.SUCCEEDED
        return self.state
