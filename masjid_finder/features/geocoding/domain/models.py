"""Domain models for place-name search"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class GeoLocation:
    """A geocoded location"""

    latitude: float
    longitude: float
    display_name: Optional[str] = None  # Nominatim's full label
    osm_type: Optional[str] = None
    osm_id: Optional[int] = None

    def __repr__(self) -> str:
        return f"GeoLocation(lat={self.latitude}, lng={self.longitude})"
