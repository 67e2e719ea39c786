from __future__ import annotations

import asyncio

import pytest

from driveaudit.exceptions import GeolocationUnavailableError
from driveaudit.geolocation import GeoCapture, SessionLocation, StaticPositionSource
from driveaudit.models.location import GeoFix


class _DeniedSource:
    async def current_position(self) -> tuple[float, float]:
        raise GeolocationUnavailableError("User denied Geolocation")


class _GatedSource:
    def __init__(self) -> None:
        self.gate = asyncio.Event()

    async def current_position(self) -> tuple[float, float]:
        await self.gate.wait()
        return 51.50735, -0.12776


@pytest.mark.asyncio
async def test_capture_stores_fixed_point_fix() -> None:
    location = SessionLocation()
    geo = GeoCapture(StaticPositionSource(40.712776, -74.005974), location)

    geo.capture()
    await geo.wait()

    assert location.fix == GeoFix(latitude_fixed=4071278, longitude_fixed=-7400597)


@pytest.mark.asyncio
async def test_capture_does_not_block() -> None:
    source = _GatedSource()
    location = SessionLocation()
    geo = GeoCapture(source, location)

    geo.capture()
    await asyncio.sleep(0)
    assert not location.is_set

    source.gate.set()
    await geo.wait()
    assert location.fix is not None
    assert location.fix.latitude_fixed == 5150735


@pytest.mark.asyncio
async def test_denied_position_leaves_cache_unset() -> None:
    location = SessionLocation()
    geo = GeoCapture(_DeniedSource(), location)

    geo.capture()
    await geo.wait()

    assert location.fix is None


@pytest.mark.asyncio
async def test_no_source_is_a_no_op() -> None:
    location = SessionLocation()
    geo = GeoCapture(None, location)

    geo.capture()
    await geo.wait()

    assert not location.is_set


@pytest.mark.asyncio
async def test_stop_cancels_pending_capture() -> None:
    location = SessionLocation()
    geo = GeoCapture(_GatedSource(), location)

    geo.capture()
    await asyncio.sleep(0)
    await geo.stop()

    assert geo._task is not None  # noqa: SLF001
    assert geo._task.cancelled()  # noqa: SLF001
    with pytest.raises(asyncio.CancelledError):
        await geo.wait()
    assert not location.is_set


@pytest.mark.asyncio
async def test_stop_after_finished_capture_keeps_fix() -> None:
    location = SessionLocation()
    geo = GeoCapture(StaticPositionSource(1.0, 2.0), location)

    geo.capture()
    await geo.wait()
    await geo.stop()

    assert location.fix == GeoFix(latitude_fixed=100000, longitude_fixed=200000)


def test_location_is_written_once() -> None:
    location = SessionLocation()
    location.set(GeoFix(latitude_fixed=1, longitude_fixed=2))
    location.set(GeoFix(latitude_fixed=3, longitude_fixed=4))
    assert location.fix == GeoFix(latitude_fixed=1, longitude_fixed=2)


def test_fix_at_origin_is_not_absent() -> None:
    location = SessionLocation()
    location.set(GeoFix(latitude_fixed=0, longitude_fixed=0))
    assert location.is_set
