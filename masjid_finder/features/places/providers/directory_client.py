"""MasjidiAPI client (through the proxy relay)"""

from typing import Any, Optional

from ....shared.exceptions.errors import HTTPError
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger

logger = get_logger(__name__)


class DirectoryClient:
    """Fetch mosque records around a point from the proxy relay"""

    def __init__(
        self,
        proxy_url: str,
        http_client: Optional[HTTPClient] = None,
        radius_km: int = 50,
        limit: int = 100,
    ) -> None:
        """
        Args:
            proxy_url: Base URL of the proxy relay
            http_client: HTTP client (a no-retry client is created when None)
            radius_km: Search radius (km)
            limit: Maximum number of records
        """
        self.endpoint = f"{proxy_url.rstrip('/')}/api/masjids"
        self.http_client = http_client or HTTPClient(timeout=10, max_retries=0)
        self.radius_km = radius_km
        self.limit = limit

    def fetch(self, latitude: float, longitude: float) -> Any:
        """
        Fetch raw MasjidiAPI records around a point

        Args:
            latitude: Center latitude
            longitude: Center longitude

        Returns:
            Any: Decoded JSON payload (list, or object wrapping the list)

        Raises:
            HTTPError: Transport failure, non-2xx status or undecodable body
        """
        params = {
            "lat": latitude,
            "long": longitude,
            "dist": self.radius_km,
            "limit": self.limit,
        }
        response = self.http_client.get(self.endpoint, params=params)

        try:
            payload = response.json()
        except ValueError as e:
            raise HTTPError(f"Proxy returned invalid JSON: {e}", status_code=response.status_code) from e

        logger.debug(f"MasjidiAPI response via proxy: {type(payload).__name__}")
        return payload

    def close(self) -> None:
        self.http_client.close()
