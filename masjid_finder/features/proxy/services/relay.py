"""Relay of directory searches to MasjidiAPI"""

from dataclasses import dataclass
from typing import Any, Optional

from ....shared.exceptions.errors import HTTPError, ValidationError
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

DEFAULT_DISTANCE = "50"
DEFAULT_LIMIT = "100"

MISSING_COORDINATES = "lat and long parameters are required"


@dataclass
class RelayResponse:
    """Status and JSON body handed back to the caller"""

    status_code: int
    body: Any


class MasjidiRelay:
    """
    Forwards directory searches to MasjidiAPI with the API key attached

    The key never leaves the server; callers only see the upstream body or
    an error envelope.
    """

    def __init__(
        self,
        api_url: str,
        api_key: str,
        http_client: Optional[HTTPClient] = None,
        timeout: float = 30,
    ) -> None:
        """
        Args:
            api_url: MasjidiAPI base URL
            api_key: MasjidiAPI key sent as x-api-key
            http_client: HTTP client (created when None)
            timeout: Upstream timeout (seconds)
        """
        self.endpoint = f"{api_url.rstrip('/')}/v2/masjids"
        self.api_key = api_key
        self.http_client = http_client or HTTPClient(timeout=timeout, max_retries=2)

    def search(
        self,
        lat: Optional[str],
        long: Optional[str],
        dist: Optional[str] = None,
        limit: Optional[str] = None,
    ) -> RelayResponse:
        """
        Relay one search

        Args:
            lat: Latitude (required)
            long: Longitude (required)
            dist: Search radius in km (defaults to 50)
            limit: Maximum records (defaults to 100)

        Returns:
            RelayResponse: Upstream status and body, or an error envelope

        Raises:
            ValidationError: lat or long is missing
        """
        if not lat or not long:
            raise ValidationError(MISSING_COORDINATES)

        params = {
            "lat": lat,
            "long": long,
            "dist": dist or DEFAULT_DISTANCE,
            "limit": limit or DEFAULT_LIMIT,
        }
        logger.info(f"Relaying search lat={lat} long={long} dist={params['dist']} limit={params['limit']}")

        try:
            response = self.http_client.get(
                self.endpoint,
                params=params,
                headers={"x-api-key": self.api_key},
                raise_for_status=False,
            )
        except HTTPError as e:
            logger.error(f"MasjidiAPI unreachable: {e}")
            return RelayResponse(500, {"error": "Internal server error", "message": str(e)})

        if not response.ok:
            logger.warning(f"MasjidiAPI returned status {response.status_code}")
            return RelayResponse(
                response.status_code,
                {"error": "MasjidiAPI request failed", "status": response.status_code},
            )

        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"MasjidiAPI returned invalid JSON: {e}")
            return RelayResponse(500, {"error": "Internal server error", "message": str(e)})

        return RelayResponse(response.status_code, body)

    def close(self) -> None:
        self.http_client.close()
