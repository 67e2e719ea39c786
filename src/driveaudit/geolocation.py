"""Best-effort device position capture.

The position is captured once at startup in the background and cached in
a :class:`SessionLocation`. Report submission reads whatever is cached at
submit time and never waits for a fix.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Protocol

from driveaudit.exceptions import GeolocationUnavailableError
from driveaudit.models.location import GeoFix

_logger = logging.getLogger(__name__)


class PositionSource(Protocol):
    """One-shot current-position query yielding decimal degrees.

    Implementations raise :class:`GeolocationUnavailableError` when the
    capability is absent or permission is denied.
    """

    async def current_position(self) -> tuple[float, float]:
        ...


class StaticPositionSource:
    """Position source answering with a fixed, configured position."""

    def __init__(self, latitude: float, longitude: float) -> None:
        self._latitude = latitude
        self._longitude = longitude

    async def current_position(self) -> tuple[float, float]:
        return self._latitude, self._longitude


class SessionLocation:
    """Process-wide cache of the most recent position fix.

    Written at most once; an unset cache means "no fix", which is
    distinct from a fix at (0, 0).
    """

    def __init__(self) -> None:
        self._fix: GeoFix | None = None

    @property
    def fix(self) -> GeoFix | None:
        return self._fix

    @property
    def is_set(self) -> bool:
        return self._fix is not None

    def set(self, fix: GeoFix) -> None:
        if self._fix is not None:
            _logger.debug("Session location already set, ignoring %s", fix)
            return
        self._fix = fix


class GeoCapture:
    """Fire-and-forget capture of the device position into a :class:`SessionLocation`."""

    def __init__(self, source: PositionSource | None, location: SessionLocation) -> None:
        self._source = source
        self._location = location
        self._task: asyncio.Task[None] | None = None

    def capture(self) -> None:
        """Start capturing in the background and return immediately."""
        if self._source is None:
            _logger.info("Geolocation is not supported or enabled.")
            return
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._capture())

    async def wait(self) -> None:
        """Wait for a started capture to finish (no-op if none was started)."""
        if self._task is not None:
            await self._task

    async def stop(self) -> None:
        """Cancel a capture that has not finished yet and wait for it to unwind."""
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _capture(self) -> None:
        assert self._source is not None  # noqa: S101
        try:
            latitude, longitude = await self._source.current_position()
            fix = GeoFix.from_degrees(latitude, longitude)
        except (GeolocationUnavailableError, ValueError, OverflowError) as exc:
            _logger.warning("Geolocation unavailable: %s", exc)
            return
        _logger.info("Latitude: %s, Longitude: %s", fix.latitude, fix.longitude)
        self._location.set(fix)
