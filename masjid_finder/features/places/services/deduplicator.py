"""Proximity deduplication of place records"""

from typing import Any, Mapping, Sequence

from ....shared.logging.config import get_logger
from ..domain.enums import DedupPolicy, PlaceSource
from ..domain.models import extract_coordinates

logger = get_logger(__name__)

# ~11 meters of latitude
DEFAULT_THRESHOLD = 0.0001

GridKey = tuple[int, int]


def grid_key(latitude: float, longitude: float, threshold: float = DEFAULT_THRESHOLD) -> GridKey:
    """
    Quantize a location into its proximity bucket

    Args:
        latitude: Latitude (degrees)
        longitude: Longitude (degrees)
        threshold: Bucket size (degrees)

    Returns:
        GridKey: Bucket indices
    """
    return (round(latitude / threshold), round(longitude / threshold))


def _is_directory_record(element: Mapping[str, Any]) -> bool:
    tags = element.get("tags") or {}
    return tags.get("source") == PlaceSource.MASJIDI_API.value


def _keyed(
    elements: Sequence[Mapping[str, Any]], threshold: float
) -> list[tuple[GridKey, Mapping[str, Any]]]:
    """Pair each element with its grid key, dropping elements without coordinates"""
    keyed = []
    for element in elements:
        coordinates = extract_coordinates(element)
        if coordinates is None:
            continue
        keyed.append((grid_key(coordinates[0], coordinates[1], threshold), element))
    return keyed


def _first_seen(keyed: list[tuple[GridKey, Mapping[str, Any]]]) -> list[Mapping[str, Any]]:
    seen: dict[GridKey, Mapping[str, Any]] = {}
    kept = []

    for key, element in keyed:
        if key in seen:
            # The preferred record only replaces the side-table entry; the
            # element already emitted for this bucket stays in the output.
            if _is_directory_record(element) and not _is_directory_record(seen[key]):
                seen[key] = element
            continue

        seen[key] = element
        kept.append(element)

    return kept


def _prefer_directory(keyed: list[tuple[GridKey, Mapping[str, Any]]]) -> list[Mapping[str, Any]]:
    # dicts keep insertion order, so buckets come out in first-occurrence order
    buckets: dict[GridKey, list[Mapping[str, Any]]] = {}
    for key, element in keyed:
        buckets.setdefault(key, []).append(element)

    kept = []
    for members in buckets.values():
        preferred = next((m for m in members if _is_directory_record(m)), members[0])
        kept.append(preferred)

    return kept


def deduplicate(
    elements: Sequence[Mapping[str, Any]],
    threshold: float = DEFAULT_THRESHOLD,
    policy: DedupPolicy = DedupPolicy.PREFER_DIRECTORY,
) -> list[Mapping[str, Any]]:
    """
    Collapse records that fall into the same proximity bucket

    Elements without resolvable coordinates are dropped. Output order follows
    the first occurrence of each bucket.

    Args:
        elements: Overpass elements and normalized directory records, mixed
        threshold: Bucket size (degrees)
        policy: Which record survives in a shared bucket

    Returns:
        list[Mapping[str, Any]]: One element per occupied bucket
    """
    if threshold <= 0:
        raise ValueError("threshold must be positive")

    keyed = _keyed(elements, threshold)

    if policy == DedupPolicy.FIRST_SEEN:
        kept = _first_seen(keyed)
    else:
        kept = _prefer_directory(keyed)

    logger.debug(
        f"Deduplicated {len(elements)} elements -> {len(kept)} "
        f"({len(elements) - len(keyed)} without coordinates, policy={policy.value})"
    )

    return kept
