"""Debounced, zoom-gated fetch trigger for map movements"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from ....shared.exceptions.errors import FetchCancelledError
from ....shared.logging.config import get_logger
from ..domain.models import Viewport, ViewState

logger = get_logger(__name__)


class ViewTrigger:
    """
    Decide when a map movement should start a fetch

    Movements below ``min_zoom`` are ignored. Otherwise every movement
    restarts the debounce timer, so only the last movement of a burst
    fetches. A movement during a fetch starts its own debounce cycle; the
    aggregator discards the superseded results.
    """

    def __init__(
        self,
        on_fetch: Callable[[Viewport], Awaitable[Any]],
        min_zoom: int = 9,
        debounce_seconds: float = 1.0,
    ) -> None:
        """
        Args:
            on_fetch: Coroutine function fetching for a viewport
            min_zoom: Minimum zoom level that fetches
            debounce_seconds: Quiet period before fetching
        """
        self.on_fetch = on_fetch
        self.min_zoom = min_zoom
        self.debounce_seconds = debounce_seconds

        self._timer: Optional[asyncio.TimerHandle] = None
        self._pending_viewport: Optional[Viewport] = None
        self._fetches: set[asyncio.Task] = set()
        self.fetch_count = 0

    @property
    def state(self) -> ViewState:
        if self._timer is not None:
            return ViewState.PENDING_DEBOUNCE
        if self._fetches:
            return ViewState.FETCHING
        return ViewState.IDLE

    def on_move(self, viewport: Viewport) -> bool:
        """
        Handle a map movement

        Must be called from the running event loop.

        Args:
            viewport: Viewport after the movement

        Returns:
            bool: True when a (re)scheduled fetch is pending
        """
        if viewport.zoom < self.min_zoom:
            logger.debug(f"Zoom {viewport.zoom} below {self.min_zoom}, movement ignored")
            return False

        if self._timer is not None:
            self._timer.cancel()

        loop = asyncio.get_running_loop()
        self._pending_viewport = viewport
        self._timer = loop.call_later(self.debounce_seconds, self._fire)
        return True

    def _fire(self) -> None:
        self._timer = None
        viewport = self._pending_viewport
        self._pending_viewport = None
        if viewport is None:
            return

        self.fetch_count += 1
        task = asyncio.ensure_future(self._run(viewport))
        self._fetches.add(task)
        task.add_done_callback(self._fetches.discard)

    async def _run(self, viewport: Viewport) -> None:
        try:
            await self.on_fetch(viewport)
        except FetchCancelledError:
            logger.debug("Fetch superseded by a newer movement")
        except Exception as e:
            logger.error(f"Fetch for viewport failed: {e}", exc_info=True)

    async def wait_idle(self) -> None:
        """Wait until no debounce is pending and every fetch has settled"""
        loop = asyncio.get_running_loop()
        while self._timer is not None or self._fetches:
            if self._timer is not None:
                await asyncio.sleep(max(0.0, self._timer.when() - loop.time()))
                # Let the timer callback run
                await asyncio.sleep(0)
            else:
                await asyncio.gather(*list(self._fetches), return_exceptions=True)

    def close(self) -> None:
        """Drop the pending timer and cancel running fetches"""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending_viewport = None
        for task in list(self._fetches):
            task.cancel()
