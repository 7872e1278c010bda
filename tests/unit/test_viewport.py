"""Tests for viewport bounds and display state"""

import pytest

from masjid_finder.features.map.domain.models import MAX_LATITUDE, MapState, PlaceCounts, Viewport
from masjid_finder.features.places.domain.models import BoundingBox, GeoPoint


@pytest.mark.parametrize(
    "lat,lng,zoom",
    [
        (40.7128, -74.0060, 12),
        (34.0522, -118.2437, 9),
        (-33.8688, 151.2093, 15),
        (0.0, 0.0, 10),
    ],
)
def test_bounds_contain_center(lat: float, lng: float, zoom: int) -> None:
    """The center is always inside the visible bounds"""
    bbox = Viewport(center_lat=lat, center_lng=lng, zoom=zoom).bounds()

    assert bbox.south < bbox.north
    assert bbox.west < bbox.east
    assert bbox.contains(lat, lng)


def test_bounds_width_matches_zoom() -> None:
    """Longitude span is the pixel width over the world size"""
    bbox = Viewport(center_lat=40.7128, center_lng=-74.0060, zoom=12, width_px=1280).bounds()

    expected_span = 1280 / (256 * 2**12) * 360
    assert bbox.east - bbox.west == pytest.approx(expected_span)
    assert (bbox.east + bbox.west) / 2 == pytest.approx(-74.0060)


def test_higher_zoom_shows_less() -> None:
    """Each zoom level halves the visible span"""
    wide = Viewport(40.7, -74.0, 11).bounds()
    narrow = Viewport(40.7, -74.0, 12).bounds()

    assert narrow.east - narrow.west == pytest.approx((wide.east - wide.west) / 2)


def test_world_view_is_clamped() -> None:
    """At zoom 0 the bounds stay inside the Web Mercator world"""
    bbox = Viewport(0.0, 0.0, 0).bounds()

    assert bbox.west == -180.0
    assert bbox.east == 180.0
    assert bbox.north == pytest.approx(MAX_LATITUDE)
    assert bbox.south == pytest.approx(-MAX_LATITUDE)


def test_moved_to_keeps_size_and_zoom() -> None:
    """Moving keeps the pixel size, and the zoom unless one is given"""
    view = Viewport(40.7, -74.0, 12, width_px=800, height_px=600)

    moved = view.moved_to(41.0, -73.0)
    zoomed = view.moved_to(41.0, -73.0, zoom=13)

    assert (moved.center_lat, moved.center_lng, moved.zoom) == (41.0, -73.0, 12)
    assert (moved.width_px, moved.height_px) == (800, 600)
    assert zoomed.zoom == 13


def test_overpass_bbox_order() -> None:
    """Overpass bbox filter is south,west,north,east"""
    bbox = BoundingBox(south=1.5, west=2.5, north=3.5, east=4.5)
    assert bbox.to_overpass() == "1.5,2.5,3.5,4.5"


def test_show_markers_updates_counts() -> None:
    """All and mosque counters track the markers; center stays zero"""
    state = MapState()
    points = [GeoPoint(1.0, 2.0), GeoPoint(3.0, 4.0)]

    state.show_markers(points)

    assert state.markers == points
    assert state.counts == PlaceCounts(all=2, mosque=2, center=0)
