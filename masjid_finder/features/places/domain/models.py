"""Domain models for the places feature"""

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .enums import LegStatus, PlaceSource


def _as_coordinate(value: Any) -> Optional[float]:
    """Coerce a raw coordinate to a finite float, or None"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def extract_coordinates(element: Any) -> Optional[tuple[float, float]]:
    """
    Resolve (lat, lon) from a raw element

    Nodes carry lat/lon directly; ways and relations fetched with
    ``out center`` carry a ``center`` object. Anything else has no usable
    coordinates.

    Args:
        element: Overpass element or normalized directory record

    Returns:
        Optional[tuple[float, float]]: (lat, lon), or None when unresolvable
    """
    if not isinstance(element, Mapping):
        return None

    if element.get("type") == "node":
        source = element
    elif isinstance(element.get("center"), Mapping):
        source = element["center"]
    else:
        return None

    lat = _as_coordinate(source.get("lat"))
    lon = _as_coordinate(source.get("lon"))
    if lat is None or lon is None:
        return None
    return (lat, lon)


@dataclass(frozen=True)
class BoundingBox:
    """Map viewport bounds in degrees"""

    south: float
    west: float
    north: float
    east: float

    def to_overpass(self) -> str:
        """Overpass QL bbox filter body: south,west,north,east"""
        return f"{self.south},{self.west},{self.north},{self.east}"

    def contains(self, latitude: float, longitude: float) -> bool:
        """Whether a point lies inside the box"""
        return self.south <= latitude <= self.north and self.west <= longitude <= self.east


@dataclass
class GeoPoint:
    """
    A mosque location after normalization

    Coordinates are always finite; elements without coordinates never become
    a GeoPoint.
    """

    latitude: float
    longitude: float
    tags: dict[str, str] = field(default_factory=dict)
    element_type: str = "node"  # node, way, relation
    osm_id: Optional[int] = None  # None for directory records

    def __repr__(self) -> str:
        return f"GeoPoint(lat={self.latitude}, lng={self.longitude}, source={self.source})"

    @property
    def source(self) -> str:
        """Provenance marker (Overpass records carry none)"""
        return self.tags.get("source") or PlaceSource.OPENSTREETMAP.value

    @property
    def is_directory_record(self) -> bool:
        return self.tags.get("source") == PlaceSource.MASJIDI_API.value

    @property
    def display_name(self) -> Optional[str]:
        return self.tags.get("name") or self.tags.get("name:en")

    @classmethod
    def from_element(cls, element: Mapping[str, Any]) -> Optional["GeoPoint"]:
        """Build from a raw element; None when it has no usable coordinates"""
        coordinates = extract_coordinates(element)
        if coordinates is None:
            return None

        raw_tags = element.get("tags") or {}
        tags = {str(k): str(v) for k, v in raw_tags.items() if v is not None}

        return cls(
            latitude=coordinates[0],
            longitude=coordinates[1],
            tags=tags,
            element_type=str(element.get("type") or "node"),
            osm_id=element.get("id"),
        )


@dataclass
class LegOutcome:
    """Result summary of one fetch leg"""

    source: PlaceSource
    status: LegStatus
    element_count: int = 0
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status != LegStatus.SUCCESS


@dataclass
class AggregationResult:
    """Deduplicated places from both sources"""

    points: list[GeoPoint] = field(default_factory=list)
    legs: list[LegOutcome] = field(default_factory=list)
    duration_seconds: Optional[float] = None

    @property
    def count(self) -> int:
        return len(self.points)

    @property
    def is_partial(self) -> bool:
        """At least one leg contributed nothing because it failed"""
        return any(leg.failed for leg in self.legs)
