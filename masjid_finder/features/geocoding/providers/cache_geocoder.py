"""Caching geocoder"""

from collections import OrderedDict
from typing import Optional

from ....shared.logging.config import get_logger
from ....shared.utils.text import normalize_text
from ..domain.models import GeoLocation
from .nominatim_geocoder import NominatimGeocoder

logger = get_logger(__name__)


class CacheGeocoder:
    """
    Nominatim geocoder behind a bounded LRU cache

    Nominatim allows one request per second, so repeated searches are served
    from memory. Misses (None) are cached as well; errors are not.
    """

    def __init__(self, geocoder: NominatimGeocoder, max_entries: int = 256) -> None:
        self.geocoder = geocoder
        self.max_entries = max_entries
        self.cache: OrderedDict[str, Optional[GeoLocation]] = OrderedDict()
        self.hit_count = 0
        self.miss_count = 0

    @staticmethod
    def cache_key(query: str) -> str:
        """Queries differing only in case or spacing share an entry"""
        return (normalize_text(query) or "").lower()

    def geocode(self, query: str) -> Optional[GeoLocation]:
        key = self.cache_key(query)
        if not key:
            return None

        if key in self.cache:
            self.hit_count += 1
            self.cache.move_to_end(key)
            logger.debug(f"Geocode cache hit: {key}")
            return self.cache[key]

        self.miss_count += 1
        location = self.geocoder.geocode(query)

        self.cache[key] = location
        if len(self.cache) > self.max_entries:
            evicted, _ = self.cache.popitem(last=False)
            logger.debug(f"Geocode cache full, evicted: {evicted}")

        return location

    def get_cache_stats(self) -> dict[str, float]:
        """
        Returns:
            dict[str, float]: cache_size, hit_count, miss_count, total_requests, hit_rate_percent
        """
        total = self.hit_count + self.miss_count
        return {
            "cache_size": len(self.cache),
            "hit_count": self.hit_count,
            "miss_count": self.miss_count,
            "total_requests": total,
            "hit_rate_percent": round(self.hit_count / total * 100, 2) if total else 0.0,
        }
