"""Nominatim forward geocoding"""
from typing import Optional

from ..domain.models import GeoLocation
from ....shared.exceptions.errors import GeocodingError, HTTPError
from ....shared.http.client import HTTPClient
from ....shared.http.rate_limiter import RateLimiter
from ....shared.logging.config import get_logger
from ....shared.utils.text import normalize_text

logger = get_logger(__name__)


class NominatimGeocoder:
    """OpenStreetMap Nominatim search"""

    def __init__(
        self,
        search_url: str = "https://nominatim.openstreetmap.org/search",
        country_codes: str = "us",
        http_client: Optional[HTTPClient] = None,
        rate_limiter: Optional[RateLimiter] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        """
        Args:
            search_url: Nominatim search endpoint
            country_codes: Comma-separated ISO country codes results are limited to
            http_client: HTTP client (created when None)
            rate_limiter: Request spacing (1 request/second when None)
            user_agent: User-Agent required by the Nominatim usage policy
        """
        self.search_url = search_url
        self.country_codes = country_codes
        self.http_client = http_client or HTTPClient(timeout=10, user_agent=user_agent)
        self.rate_limiter = rate_limiter or RateLimiter(requests_per_second=1.0)

        logger.info(f"NominatimGeocoder initialized (countrycodes={country_codes})")

    def geocode(self, query: str) -> Optional[GeoLocation]:
        """
        Geocode a free-text place name

        Args:
            query: Place name, address or ZIP code

        Returns:
            Optional[GeoLocation]: First result (None when nothing matches)

        Raises:
            GeocodingError: The request failed or the response was unusable
        """
        query = normalize_text(query)
        if not query:
            logger.warning("Empty query provided for geocoding")
            return None

        params = {
            "format": "json",
            "q": query,
            "countrycodes": self.country_codes,
            "limit": 1,
        }

        self.rate_limiter.wait()

        try:
            logger.debug(f"Geocoding query: {query}")
            response = self.http_client.get(self.search_url, params=params)
            results = response.json()
        except HTTPError as e:
            raise GeocodingError(f"Nominatim request failed: {e}") from e
        except ValueError as e:
            raise GeocodingError(f"Nominatim returned invalid JSON: {e}") from e

        if not isinstance(results, list):
            raise GeocodingError(f"Unexpected Nominatim response for {query}: {results!r}")

        if not results:
            logger.warning(f"No geocoding results for query: {query}")
            return None

        try:
            result = results[0]
            latitude = float(result["lat"])
            longitude = float(result["lon"])
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingError(f"Invalid geocoding result for {query}: {e}") from e

        geo_location = GeoLocation(
            latitude=latitude,
            longitude=longitude,
            display_name=result.get("display_name"),
            osm_type=result.get("osm_type"),
            osm_id=result.get("osm_id"),
        )

        logger.debug(f"Geocoded: {query} -> ({latitude}, {longitude})")

        return geo_location
