"""Tests for the debounced view trigger"""

import asyncio

import pytest

from masjid_finder.features.map.domain.models import Viewport, ViewState
from masjid_finder.features.map.services.view_trigger import ViewTrigger
from masjid_finder.shared.exceptions.errors import FetchCancelledError

DEBOUNCE = 0.05


def viewport(lat: float = 40.71, lng: float = -74.0, zoom: int = 12) -> Viewport:
    return Viewport(center_lat=lat, center_lng=lng, zoom=zoom)


class RecordingFetch:
    """on_fetch stand-in remembering the viewports it was called with"""

    def __init__(self, delay: float = 0.0, error: Exception = None) -> None:
        self.delay = delay
        self.error = error
        self.viewports: list[Viewport] = []

    async def __call__(self, view: Viewport) -> None:
        self.viewports.append(view)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error


@pytest.mark.asyncio
async def test_burst_of_moves_fetches_once() -> None:
    """Only the last movement of a burst fetches"""
    on_fetch = RecordingFetch()
    trigger = ViewTrigger(on_fetch, debounce_seconds=DEBOUNCE)

    for i in range(5):
        assert trigger.on_move(viewport(lat=40.0 + i))
        await asyncio.sleep(DEBOUNCE / 5)

    await trigger.wait_idle()

    assert trigger.fetch_count == 1
    assert on_fetch.viewports == [viewport(lat=44.0)]


@pytest.mark.asyncio
@pytest.mark.parametrize("zoom", [0, 5, 8])
async def test_low_zoom_never_fetches(zoom: int) -> None:
    """Movements below the minimum zoom are ignored"""
    on_fetch = RecordingFetch()
    trigger = ViewTrigger(on_fetch, min_zoom=9, debounce_seconds=DEBOUNCE)

    assert trigger.on_move(viewport(zoom=zoom)) is False
    await asyncio.sleep(DEBOUNCE * 2)
    await trigger.wait_idle()

    assert trigger.fetch_count == 0
    assert trigger.state == ViewState.IDLE


@pytest.mark.asyncio
async def test_minimum_zoom_is_inclusive() -> None:
    """A movement exactly at the minimum zoom fetches"""
    on_fetch = RecordingFetch()
    trigger = ViewTrigger(on_fetch, min_zoom=9, debounce_seconds=DEBOUNCE)

    assert trigger.on_move(viewport(zoom=9))
    await trigger.wait_idle()

    assert trigger.fetch_count == 1


@pytest.mark.asyncio
async def test_state_transitions() -> None:
    """idle -> pending debounce -> fetching -> idle"""
    on_fetch = RecordingFetch(delay=DEBOUNCE)
    trigger = ViewTrigger(on_fetch, debounce_seconds=DEBOUNCE)

    assert trigger.state == ViewState.IDLE

    trigger.on_move(viewport())
    assert trigger.state == ViewState.PENDING_DEBOUNCE

    await asyncio.sleep(DEBOUNCE * 1.5)
    assert trigger.state == ViewState.FETCHING

    await trigger.wait_idle()
    assert trigger.state == ViewState.IDLE


@pytest.mark.asyncio
async def test_move_during_fetch_starts_new_cycle() -> None:
    """A movement while fetching debounces again and fetches once more"""
    on_fetch = RecordingFetch(delay=DEBOUNCE * 2)
    trigger = ViewTrigger(on_fetch, debounce_seconds=DEBOUNCE)

    trigger.on_move(viewport(lat=1.0))
    await asyncio.sleep(DEBOUNCE * 1.5)
    assert trigger.state == ViewState.FETCHING

    trigger.on_move(viewport(lat=2.0))
    assert trigger.state == ViewState.PENDING_DEBOUNCE

    await trigger.wait_idle()

    assert trigger.fetch_count == 2
    assert [v.center_lat for v in on_fetch.viewports] == [1.0, 2.0]


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [FetchCancelledError("superseded"), RuntimeError("boom")])
async def test_fetch_errors_are_contained(error: Exception) -> None:
    """A failing fetch leaves the trigger usable"""
    on_fetch = RecordingFetch(error=error)
    trigger = ViewTrigger(on_fetch, debounce_seconds=DEBOUNCE)

    trigger.on_move(viewport())
    await trigger.wait_idle()
    trigger.on_move(viewport())
    await trigger.wait_idle()

    assert trigger.fetch_count == 2
    assert trigger.state == ViewState.IDLE


@pytest.mark.asyncio
async def test_close_drops_pending_fetch() -> None:
    """Closing before the debounce elapses prevents the fetch"""
    on_fetch = RecordingFetch()
    trigger = ViewTrigger(on_fetch, debounce_seconds=DEBOUNCE)

    trigger.on_move(viewport())
    trigger.close()
    await asyncio.sleep(DEBOUNCE * 2)

    assert trigger.fetch_count == 0
    assert trigger.state == ViewState.IDLE
