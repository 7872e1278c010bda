"""Map client: the single owner of viewport, display state and fetch session"""

import asyncio
from typing import Optional, Union

from ....infrastructure.config.settings import Settings
from ....shared.exceptions.errors import FetchCancelledError, GeocodingError
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger
from ...details.domain.models import MosqueDetails
from ...details.services.details_builder import build_details
from ...geocoding.domain.models import GeoLocation
from ...geocoding.providers.cache_geocoder import CacheGeocoder
from ...geocoding.providers.nominatim_geocoder import NominatimGeocoder
from ...notifications.providers.toast_notifier import ToastNotifier
from ...places.domain.enums import DedupPolicy
from ...places.domain.models import AggregationResult, GeoPoint
from ...places.providers.directory_client import DirectoryClient
from ...places.providers.overpass_client import OverpassClient
from ...places.services.aggregator import Aggregator
from ..domain.models import MapState, Viewport
from .view_trigger import ViewTrigger

logger = get_logger(__name__)

# Zoom used after a place search or a location fix
FOCUS_ZOOM = 13

LOCATION_NOT_FOUND = "Location not found."
SEARCH_FAILED = "An error occurred while searching."

Geocoder = Union[NominatimGeocoder, CacheGeocoder]


class MapController:
    """
    Headless map client

    Holds the one authoritative viewport, display state and aggregator of a
    running client. Map movements go through the view trigger; only the
    latest fetch session updates the markers.
    """

    def __init__(
        self,
        aggregator: Aggregator,
        geocoder: Geocoder,
        viewport: Viewport,
        notifier: Optional[ToastNotifier] = None,
        min_zoom: int = 9,
        debounce_seconds: float = 1.0,
        prayer_timezone: Optional[str] = None,
    ) -> None:
        """
        Args:
            aggregator: Source aggregator (its state becomes the display state)
            geocoder: Place-name geocoder
            viewport: Initial viewport
            notifier: Toast notifier
            min_zoom: Minimum zoom level that fetches
            debounce_seconds: Quiet period after the last movement
            prayer_timezone: Timezone for the details panel date
        """
        self.aggregator = aggregator
        self.geocoder = geocoder
        self.viewport = viewport
        self.notifier = notifier or aggregator.notifier or ToastNotifier()
        self.state: MapState = aggregator.state
        self.prayer_timezone = prayer_timezone
        self.last_result: Optional[AggregationResult] = None

        self.view_trigger = ViewTrigger(
            on_fetch=self._fetch_for_viewport,
            min_zoom=min_zoom,
            debounce_seconds=debounce_seconds,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        notifier: Optional[ToastNotifier] = None,
    ) -> "MapController":
        """
        Wire a controller from settings

        Args:
            settings: Application settings
            notifier: Toast notifier (created when None)

        Returns:
            MapController: Ready-to-use controller
        """
        notifier = notifier or ToastNotifier()
        state = MapState()

        # The legs enforce their own timeouts, so no retries here
        directory_client = DirectoryClient(
            proxy_url=settings.proxy_url,
            http_client=HTTPClient(
                timeout=settings.directory_timeout,
                max_retries=0,
                user_agent=settings.user_agent,
            ),
            radius_km=settings.search_radius_km,
            limit=settings.search_limit,
        )
        overpass_client = OverpassClient(
            overpass_url=settings.overpass_url,
            http_client=HTTPClient(
                timeout=settings.overpass_timeout,
                max_retries=0,
                user_agent=settings.user_agent,
            ),
        )

        aggregator = Aggregator(
            directory_client=directory_client,
            overpass_client=overpass_client,
            state=state,
            notifier=notifier,
            directory_timeout=settings.directory_timeout,
            overpass_timeout=settings.overpass_timeout,
            dedup_threshold=settings.dedup_threshold,
            dedup_policy=DedupPolicy.from_value(settings.dedup_policy),
        )

        geocoder: Geocoder = NominatimGeocoder(
            search_url=settings.nominatim_url,
            country_codes=settings.geocode_country,
            user_agent=settings.user_agent,
        )
        if settings.geocoding_cache_enabled:
            geocoder = CacheGeocoder(geocoder)

        viewport = Viewport(
            center_lat=settings.default_center_lat,
            center_lng=settings.default_center_lng,
            zoom=settings.default_zoom,
            width_px=settings.viewport_width,
            height_px=settings.viewport_height,
        )

        return cls(
            aggregator=aggregator,
            geocoder=geocoder,
            viewport=viewport,
            notifier=notifier,
            min_zoom=settings.min_zoom_for_search,
            debounce_seconds=settings.debounce_seconds,
            prayer_timezone=settings.prayer_timezone,
        )

    def set_view(self, latitude: float, longitude: float, zoom: Optional[int] = None) -> bool:
        """
        Move the map, as a pan or zoom by the user would

        Args:
            latitude: New center latitude
            longitude: New center longitude
            zoom: New zoom level (unchanged when None)

        Returns:
            bool: True when the movement scheduled a fetch
        """
        self.viewport = self.viewport.moved_to(latitude, longitude, zoom)
        logger.debug(f"View moved to ({latitude}, {longitude}) zoom={self.viewport.zoom}")
        return self.view_trigger.on_move(self.viewport)

    async def fetch_in_view(self) -> Optional[AggregationResult]:
        """
        Fetch the current viewport immediately, bypassing the debounce

        Returns:
            Optional[AggregationResult]: Result, or None when superseded
        """
        try:
            return await self._fetch_for_viewport(self.viewport)
        except FetchCancelledError:
            logger.debug("Immediate fetch superseded")
            return None

    async def _fetch_for_viewport(self, viewport: Viewport) -> AggregationResult:
        result = await self.aggregator.fetch_aggregated_points(
            viewport.bounds(),
            viewport.center_lat,
            viewport.center_lng,
        )
        # Only reached by the authoritative session
        self.state.show_markers(result.points)
        self.last_result = result
        return result

    async def search(self, query: str) -> Optional[GeoLocation]:
        """
        Center the map on a searched place

        Args:
            query: Place name, address or ZIP code

        Returns:
            Optional[GeoLocation]: The place found, or None
        """
        if not query or not query.strip():
            return None

        self.state.loading = True
        try:
            location = await asyncio.to_thread(self.geocoder.geocode, query)
        except GeocodingError as e:
            logger.error(f"Search error: {e}")
            self.notifier.error(SEARCH_FAILED)
            return None
        finally:
            self.state.loading = False

        if location is None:
            self.notifier.warning(LOCATION_NOT_FOUND)
            return None

        logger.info(f"Search '{query}' -> ({location.latitude}, {location.longitude})")
        self.set_view(location.latitude, location.longitude, FOCUS_ZOOM)
        return location

    def locate(self, latitude: float, longitude: float) -> bool:
        """
        Center the map on the user's position

        Args:
            latitude: User latitude (from the device)
            longitude: User longitude (from the device)

        Returns:
            bool: True when the movement scheduled a fetch
        """
        self.state.current_location = (latitude, longitude)
        return self.set_view(latitude, longitude, FOCUS_ZOOM)

    def select(self, point: GeoPoint) -> MosqueDetails:
        """Open the details panel of a mosque"""
        self.state.selected = point
        return build_details(point, self.prayer_timezone)

    def close_panel(self) -> None:
        self.state.selected = None

    async def wait_idle(self) -> None:
        """Wait for pending debounces and fetches to settle"""
        await self.view_trigger.wait_idle()

    def close(self) -> None:
        """Stop pending work and release HTTP sessions"""
        self.view_trigger.close()
        self.aggregator.cancel()
        self.aggregator.directory_client.close()
        self.aggregator.overpass_client.close()
        if isinstance(self.geocoder, CacheGeocoder):
            logger.info(f"Geocode cache stats: {self.geocoder.get_cache_stats()}")
