"""Parallel aggregation of both mosque sources"""

import asyncio
import itertools
import time
from typing import Any, Callable, Optional

from ....shared.exceptions.errors import FetchCancelledError, FetchTimeoutError, HTTPError
from ....shared.logging.config import get_logger
from ....shared.utils.datetime_utils import format_duration
from ...map.domain.models import MapState
from ...notifications.providers.toast_notifier import ToastNotifier
from ..domain.enums import DedupPolicy, LegStatus, PlaceSource
from ..domain.models import AggregationResult, BoundingBox, GeoPoint, LegOutcome
from ..providers.directory_client import DirectoryClient
from ..providers.overpass_client import OverpassClient
from .deduplicator import DEFAULT_THRESHOLD, deduplicate
from .normalizer import normalize_directory_records

logger = get_logger(__name__)

PARTIAL_RESULTS_WARNING = "Failed to load some mosques. Showing available data."

_session_ids = itertools.count(1)


class FetchSession:
    """
    One in-flight aggregation attempt

    Cancelling a session cancels its leg tasks; whatever they would have
    returned is discarded.
    """

    def __init__(self) -> None:
        self.session_id = next(_session_ids)
        self.cancelled = False
        self.tasks: list[asyncio.Task] = []

    def __repr__(self) -> str:
        return f"FetchSession(id={self.session_id}, cancelled={self.cancelled})"

    def cancel(self) -> None:
        self.cancelled = True
        for task in self.tasks:
            task.cancel()


class Aggregator:
    """
    Fetch mosques from MasjidiAPI and Overpass concurrently

    Only one session is authoritative at a time: starting an aggregation
    cancels the previous one, and a cancelled aggregation raises
    FetchCancelledError instead of returning results.
    """

    def __init__(
        self,
        directory_client: DirectoryClient,
        overpass_client: OverpassClient,
        state: Optional[MapState] = None,
        notifier: Optional[ToastNotifier] = None,
        directory_timeout: float = 10.0,
        overpass_timeout: float = 15.0,
        dedup_threshold: float = DEFAULT_THRESHOLD,
        dedup_policy: DedupPolicy = DedupPolicy.PREFER_DIRECTORY,
    ) -> None:
        """
        Args:
            directory_client: MasjidiAPI client (through the proxy relay)
            overpass_client: Overpass API client
            state: Display state whose loading flag is toggled
            notifier: Receives the partial-results warning
            directory_timeout: Directory leg timeout (seconds)
            overpass_timeout: Overpass leg timeout (seconds)
            dedup_threshold: Proximity bucket size (degrees)
            dedup_policy: Which record survives in a shared bucket
        """
        self.directory_client = directory_client
        self.overpass_client = overpass_client
        self.state = state if state is not None else MapState()
        self.notifier = notifier
        self.directory_timeout = directory_timeout
        self.overpass_timeout = overpass_timeout
        self.dedup_threshold = dedup_threshold
        self.dedup_policy = dedup_policy

        self.current_session: Optional[FetchSession] = None

    def cancel(self) -> None:
        """Cancel the active session, if any"""
        if self.current_session is not None:
            logger.debug(f"Cancelling {self.current_session}")
            self.current_session.cancel()
            self.current_session = None
            self.state.loading = False

    def _start_session(self) -> FetchSession:
        self.cancel()
        session = FetchSession()
        self.current_session = session
        return session

    async def fetch_aggregated_points(
        self,
        bbox: BoundingBox,
        center_lat: float,
        center_lng: float,
    ) -> AggregationResult:
        """
        Fetch, merge and deduplicate mosques for a viewport

        Args:
            bbox: Viewport bounds (Overpass leg)
            center_lat: Viewport center latitude (directory leg)
            center_lng: Viewport center longitude (directory leg)

        Returns:
            AggregationResult: Deduplicated points and per-leg outcomes

        Raises:
            FetchCancelledError: A newer aggregation superseded this one
        """
        session = self._start_session()
        started = time.monotonic()
        self.state.loading = True

        logger.info(
            f"Aggregation started (session={session.session_id}, "
            f"bbox={bbox.to_overpass()}, center=({center_lat}, {center_lng}))"
        )

        try:
            directory_task = asyncio.create_task(
                self._run_leg(
                    PlaceSource.MASJIDI_API,
                    self.directory_client.fetch,
                    (center_lat, center_lng),
                    self.directory_timeout,
                )
            )
            overpass_task = asyncio.create_task(
                self._run_leg(
                    PlaceSource.OPENSTREETMAP,
                    self.overpass_client.fetch_elements,
                    (bbox,),
                    self.overpass_timeout,
                )
            )
            session.tasks = [directory_task, overpass_task]

            # Settle both legs; a failing leg never fails the other one
            await asyncio.gather(directory_task, overpass_task, return_exceptions=True)

            if session.cancelled:
                raise FetchCancelledError(f"Session {session.session_id} was superseded")

            directory_outcome, directory_payload = directory_task.result()
            overpass_outcome, overpass_elements = overpass_task.result()

            directory_elements = normalize_directory_records(directory_payload)
            directory_outcome.element_count = len(directory_elements)

            combined = directory_elements + list(overpass_elements or [])
            unique = deduplicate(combined, threshold=self.dedup_threshold, policy=self.dedup_policy)
            points = [p for p in (GeoPoint.from_element(e) for e in unique) if p is not None]

            result = AggregationResult(
                points=points,
                legs=[directory_outcome, overpass_outcome],
                duration_seconds=time.monotonic() - started,
            )

        except asyncio.CancelledError:
            # The caller itself was cancelled; take the legs down too
            session.cancel()
            raise

        finally:
            # A superseded session leaves the loading flag to its successor
            if self.current_session is session:
                self.current_session = None
                self.state.loading = False

        logger.info(
            f"Aggregation finished (session={session.session_id}): "
            f"{len(directory_elements)} directory + {overpass_outcome.element_count} "
            f"overpass -> {result.count} unique in {format_duration(result.duration_seconds)}"
        )

        if result.is_partial and self.notifier is not None:
            self.notifier.warning(PARTIAL_RESULTS_WARNING)

        return result

    async def _run_leg(
        self,
        source: PlaceSource,
        fetch: Callable[..., Any],
        args: tuple,
        timeout: float,
    ) -> tuple[LegOutcome, Any]:
        """
        Run one blocking fetch in a worker thread, bounded by its timeout

        Returns:
            tuple[LegOutcome, Any]: Outcome and payload (None when the leg failed)
        """
        try:
            payload = await asyncio.wait_for(asyncio.to_thread(fetch, *args), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{source.value} timed out after {timeout}s, continuing without it")
            return LegOutcome(source, LegStatus.TIMEOUT, error=f"timed out after {timeout}s"), None
        except FetchTimeoutError as e:
            logger.warning(f"{source.value} request timed out, continuing without it: {e}")
            return LegOutcome(source, LegStatus.TIMEOUT, error=str(e)), None
        except HTTPError as e:
            logger.warning(f"{source.value} unavailable, continuing without it: {e}")
            return LegOutcome(source, LegStatus.FAILED, error=str(e)), None
        except Exception as e:
            logger.error(f"Unexpected {source.value} failure: {e}", exc_info=True)
            return LegOutcome(source, LegStatus.FAILED, error=str(e)), None

        count = len(payload) if isinstance(payload, list) else 0
        return LegOutcome(source, LegStatus.SUCCESS, element_count=count), payload
