"""MasjidiAPI record normalizer"""

from typing import Any, Mapping

from ....shared.logging.config import get_logger
from ....shared.utils.text import first_present
from ..domain.enums import PlaceSource

logger = get_logger(__name__)

# Keys that may hold the record list when the payload is an object
RECORD_LIST_KEYS: tuple[str, ...] = ("masjids", "results")

LATITUDE_KEYS: tuple[str, ...] = ("latitude", "lat")
LONGITUDE_KEYS: tuple[str, ...] = ("longitude", "lng", "lon")

# OSM tag -> directory field names, first present wins
TAG_FIELD_CHAINS: dict[str, tuple[str, ...]] = {
    "name": ("name", "title"),
    "addr:street": ("address", "street"),
    "addr:city": ("city",),
    "addr:state": ("state",),
    "addr:postcode": ("zipCode", "zip"),
    "phone": ("phone", "phoneNumber"),
    "website": ("website",),
}

# Set on every directory record regardless of its content
FIXED_TAGS: dict[str, str] = {
    "amenity": "place_of_worship",
    "religion": "muslim",
    "source": PlaceSource.MASJIDI_API.value,
}


def extract_records(payload: Any) -> list[Any]:
    """
    Find the record list in a MasjidiAPI payload

    Args:
        payload: Decoded JSON (a bare list, or an object wrapping the list)

    Returns:
        list[Any]: Raw records (empty when none can be found)
    """
    if isinstance(payload, list):
        return payload

    if isinstance(payload, Mapping):
        for key in RECORD_LIST_KEYS:
            records = payload.get(key)
            if records:
                return list(records) if isinstance(records, list) else []

    return []


def normalize_directory_record(record: Mapping[str, Any]) -> dict[str, Any]:
    """
    Convert one MasjidiAPI record into an Overpass node-shaped element

    Coordinates are copied as found; a record without them is dropped later
    by the deduplicator.

    Args:
        record: Raw MasjidiAPI record

    Returns:
        dict[str, Any]: {"type": "node", "lat", "lon", "tags"}
    """
    tags: dict[str, str] = {}
    for tag, keys in TAG_FIELD_CHAINS.items():
        value = first_present(record, keys)
        if value is not None:
            tags[tag] = str(value)
    tags.update(FIXED_TAGS)

    return {
        "type": "node",
        "lat": first_present(record, LATITUDE_KEYS),
        "lon": first_present(record, LONGITUDE_KEYS),
        "tags": tags,
    }


def normalize_directory_records(payload: Any) -> list[dict[str, Any]]:
    """
    Convert a MasjidiAPI payload into node-shaped elements

    Args:
        payload: Decoded JSON response of the proxy relay

    Returns:
        list[dict[str, Any]]: Normalized elements
    """
    records = extract_records(payload)
    elements = [normalize_directory_record(r) for r in records if isinstance(r, Mapping)]

    skipped = len(records) - len(elements)
    if skipped:
        logger.debug(f"Skipped {skipped} non-object MasjidiAPI records")

    return elements
