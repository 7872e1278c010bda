"""Enums for the places feature"""
from enum import Enum


class PlaceSource(str, Enum):
    """Provenance of a place record"""

    MASJIDI_API = "MasjidiAPI"  # community directory, via the proxy relay
    OPENSTREETMAP = "OpenStreetMap"  # Overpass API


class DedupPolicy(str, Enum):
    """How a grid bucket picks its surviving record"""

    # Bucket everything first, then keep a MasjidiAPI record when the bucket has one
    PREFER_DIRECTORY = "prefer_directory"
    # Single pass, first record per bucket wins; a later MasjidiAPI record only
    # replaces the side-table entry and is never emitted
    FIRST_SEEN = "first_seen"

    @classmethod
    def from_value(cls, value: str) -> "DedupPolicy":
        """Build from a settings value"""
        normalized = value.strip().lower()
        for policy in cls:
            if policy.value == normalized:
                return policy
        raise ValueError(f"Unknown dedup policy: {value}")


class LegStatus(str, Enum):
    """Outcome of one fetch leg"""

    SUCCESS = "success"
    FAILED = "failed"  # network error or non-2xx status
    TIMEOUT = "timeout"
