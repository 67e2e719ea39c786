"""Application context wiring the flows to one ledger client."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from driveaudit.config import DriveAuditConfig
from driveaudit.exceptions import DriveAuditError
from driveaudit.flows import FlowState, ReportHistoryFlow, ReportSubmissionFlow, ScoreFlow
from driveaudit.geolocation import GeoCapture, PositionSource, SessionLocation, StaticPositionSource
from driveaudit.ledger import LedgerBackend, LedgerClient
from driveaudit.view import FormInput, ViewState
from driveaudit.web3_backend import Web3LedgerBackend

_logger = logging.getLogger(__name__)


class DriveAuditApp:
    """One reporting session: shared view, location cache and ledger client.

    Usage::

        async with DriveAuditApp(DriveAuditConfig.from_env()) as app:
            await app.start()
            await app.handle_driver_score(FormInput(state="NY", plate="ABC123"))
            print(app.view.score_text)

    Parameters
    ----------
    config : DriveAuditConfig
        Client configuration.
    backend : LedgerBackend or None
        Ledger capability. Defaults to a web3.py backend for
        ``config.provider_url``.
    position_source : PositionSource or None
        Device position source. Defaults to the static position in
        *config*, if any.
    session : aiohttp.ClientSession or None
        Shared HTTP session; one is created (and closed) when omitted.
    """

    def __init__(
        self,
        config: DriveAuditConfig,
        *,
        backend: LedgerBackend | None = None,
        position_source: PositionSource | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._backend = backend
        self._external_session = session is not None
        self._http_session = session
        if position_source is None and config.has_static_position:
            assert config.latitude is not None and config.longitude is not None  # noqa: S101
            position_source = StaticPositionSource(config.latitude, config.longitude)

        self.view = ViewState()
        self.location = SessionLocation()
        self.geo = GeoCapture(position_source, self.location)
        self._ledger: LedgerClient | None = None
        self._submission: ReportSubmissionFlow | None = None
        self._history: ReportHistoryFlow | None = None
        self._score: ScoreFlow | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> DriveAuditApp:
        backend = self._backend
        if backend is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            backend = Web3LedgerBackend(self._config, self._http_session)

        ledger = LedgerClient(backend, call_timeout=self._config.call_timeout)
        self._ledger = ledger
        self._submission = ReportSubmissionFlow(ledger, self.view, self.location)
        self._history = ReportHistoryFlow(ledger, self.view)
        self._score = ScoreFlow(ledger, self.view)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.geo.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._ledger = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_ledger(self) -> LedgerClient:
        if self._ledger is None:
            raise DriveAuditError("App not initialized. Use 'async with DriveAuditApp(...) as app:'")
        return self._ledger

    @property
    def submission(self) -> ReportSubmissionFlow:
        self._require_ledger()
        assert self._submission is not None  # noqa: S101
        return self._submission

    @property
    def history(self) -> ReportHistoryFlow:
        self._require_ledger()
        assert self._history is not None  # noqa: S101
        return self._history

    @property
    def score(self) -> ScoreFlow:
        self._require_ledger()
        assert self._score is not None  # noqa: S101
        return self._score

    # ------------------------------------------------------------------
    # Startup and user actions
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Reset the view, start position capture and show the active account."""
        ledger = self._require_ledger()
        self.view.reset()
        self.geo.capture()
        try:
            account = await ledger.resolve_account()
        except DriveAuditError as exc:
            _logger.warning("No active account: %s", exc)
            return
        self.view.account = account
        _logger.info("Account: %s", account)

    async def handle_report(self, form: FormInput) -> FlowState:
        return await self.submission.run(form)

    async def handle_get_reports(self, form: FormInput) -> FlowState:
        return await self.history.run(form)

    async def handle_driver_score(self, form: FormInput) -> FlowState:
        return await self.score.run(form)
