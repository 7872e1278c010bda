"""OpenStreetMap Overpass API client"""

from typing import Any, Optional

from ....shared.exceptions.errors import HTTPError
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger
from ..domain.models import BoundingBox

logger = get_logger(__name__)

# Matched case-insensitively anywhere in the name tag
MOSQUE_NAME_TERMS: tuple[str, ...] = (
    "Mosque",
    "Masjid",
    "Masjed",
    "Islamic Center",
    "Islamic Centre",
    "Muslim Community",
    "Musalla",
    "Musallah",
    "Jamia",
    "Jami",
    "Prayer Hall",
    "Prayer Room",
    "Islamic Society",
    "Islamic Foundation",
    "Islamic Association",
    "Dar al",
    "Darul",
)

BUILDING_NAME_TERMS: tuple[str, ...] = ("Mosque", "Masjid", "Islamic")

RELIGION_VALUES: tuple[str, ...] = ("muslim", "islam")

# Tag filters combined with each religion value
RELIGIOUS_FILTERS: tuple[str, ...] = (
    '["amenity"="place_of_worship"]',
    '["amenity"="community_centre"]',
    '["office"="religious"]',
)


def build_overpass_query(bbox: BoundingBox, server_timeout: int = 60) -> str:
    """
    Build the Overpass QL query for mosques inside a bounding box

    The statements form a union, so an element matched by several predicates
    is returned once.

    Args:
        bbox: Viewport bounds
        server_timeout: Overpass server-side timeout (seconds)

    Returns:
        str: Overpass QL query
    """
    area = f"({bbox.to_overpass()})"
    statements = []

    for tag_filter in RELIGIOUS_FILTERS:
        for religion in RELIGION_VALUES:
            statements.append(f'nwr{tag_filter}["religion"="{religion}"]{area};')

    statements.append(f'nwr["building"="mosque"]{area};')
    statements.append(f'nwr["name"~"{"|".join(MOSQUE_NAME_TERMS)}",i]{area};')
    statements.append(f'nwr["building"]["name"~"{"|".join(BUILDING_NAME_TERMS)}",i]{area};')

    body = "\n".join(f"  {statement}" for statement in statements)
    return f"[out:json][timeout:{server_timeout}];\n(\n{body}\n);\nout center;"


class OverpassClient:
    """Query mosque elements from the Overpass API"""

    def __init__(
        self,
        overpass_url: str,
        http_client: Optional[HTTPClient] = None,
    ) -> None:
        """
        Args:
            overpass_url: Overpass interpreter endpoint
            http_client: HTTP client (a no-retry client is created when None)
        """
        self.overpass_url = overpass_url
        self.http_client = http_client or HTTPClient(timeout=15, max_retries=0)

    def fetch_elements(self, bbox: BoundingBox) -> list[dict[str, Any]]:
        """
        Fetch mosque elements inside a bounding box

        Args:
            bbox: Viewport bounds

        Returns:
            list[dict[str, Any]]: Raw Overpass elements

        Raises:
            HTTPError: Transport failure, non-2xx status or undecodable body
        """
        query = build_overpass_query(bbox)
        logger.debug(f"Overpass query for bbox {bbox.to_overpass()}")

        response = self.http_client.post(self.overpass_url, data={"data": query})

        try:
            payload = response.json()
        except ValueError as e:
            raise HTTPError(f"Overpass returned invalid JSON: {e}", status_code=response.status_code) from e

        elements = payload.get("elements") if isinstance(payload, dict) else None
        return list(elements or [])

    def close(self) -> None:
        self.http_client.close()
