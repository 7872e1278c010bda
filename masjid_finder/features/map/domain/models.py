"""Domain models for the map client"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ...places.domain.models import BoundingBox, GeoPoint

TILE_SIZE = 256
MAX_LATITUDE = 85.0511287798  # Web Mercator limit


class ViewState(str, Enum):
    """View trigger state"""

    IDLE = "idle"
    PENDING_DEBOUNCE = "pending_debounce"
    FETCHING = "fetching"


def _project(latitude: float, longitude: float, world_size: float) -> tuple[float, float]:
    """lat/lng -> Web Mercator pixel coordinates"""
    lat = max(-MAX_LATITUDE, min(MAX_LATITUDE, latitude))
    x = (longitude + 180.0) / 360.0 * world_size
    sin_lat = math.sin(math.radians(lat))
    y = (0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)) * world_size
    return x, y


def _unproject(x: float, y: float, world_size: float) -> tuple[float, float]:
    """Web Mercator pixel coordinates -> lat/lng"""
    longitude = x / world_size * 360.0 - 180.0
    latitude = math.degrees(math.atan(math.sinh(math.pi * (1 - 2 * y / world_size))))
    return latitude, longitude


@dataclass(frozen=True)
class Viewport:
    """What the map currently shows"""

    center_lat: float
    center_lng: float
    zoom: int
    width_px: int = 1280
    height_px: int = 800

    def bounds(self) -> BoundingBox:
        """
        Bounding box of the visible area

        Returns:
            BoundingBox: Bounds clamped to the Web Mercator latitude range and ±180° longitude
        """
        world_size = TILE_SIZE * 2.0**self.zoom
        cx, cy = _project(self.center_lat, self.center_lng, world_size)
        half_w = self.width_px / 2
        half_h = self.height_px / 2

        north, west = _unproject(cx - half_w, max(0.0, cy - half_h), world_size)
        south, east = _unproject(cx + half_w, min(world_size, cy + half_h), world_size)

        return BoundingBox(
            south=south,
            west=max(-180.0, west),
            north=north,
            east=min(180.0, east),
        )

    def moved_to(self, latitude: float, longitude: float, zoom: Optional[int] = None) -> "Viewport":
        """Copy centred elsewhere"""
        return Viewport(
            center_lat=latitude,
            center_lng=longitude,
            zoom=self.zoom if zoom is None else zoom,
            width_px=self.width_px,
            height_px=self.height_px,
        )


@dataclass
class PlaceCounts:
    """Counters shown on the filter buttons"""

    all: int = 0
    mosque: int = 0
    center: int = 0  # community centres are not classified yet

    @classmethod
    def from_total(cls, total: int) -> "PlaceCounts":
        return cls(all=total, mosque=total, center=0)


@dataclass
class MapState:
    """Display state of the running client"""

    markers: list[GeoPoint] = field(default_factory=list)
    counts: PlaceCounts = field(default_factory=PlaceCounts)
    loading: bool = False
    selected: Optional[GeoPoint] = None
    current_location: Optional[tuple[float, float]] = None

    def show_markers(self, points: list[GeoPoint]) -> None:
        """Replace the displayed markers and counters"""
        self.markers = list(points)
        self.counts = PlaceCounts.from_total(len(points))
