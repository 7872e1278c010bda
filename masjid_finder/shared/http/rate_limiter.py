"""Rate limiting for public OSM services"""

import time
from typing import Optional

from ..logging.config import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    Enforce a minimum interval between requests

    Nominatim's usage policy allows at most one request per second.
    """

    def __init__(
        self,
        min_interval: float = 1.0,
        requests_per_second: Optional[float] = None,
    ):
        """
        Args:
            min_interval: Minimum seconds between two requests
            requests_per_second: Maximum requests per second (overrides min_interval)
        """
        if requests_per_second:
            self.min_interval = 1.0 / requests_per_second
        else:
            self.min_interval = min_interval

        self.last_request_time: Optional[float] = None

        logger.debug(f"RateLimiter initialized: min_interval={self.min_interval:.2f}s")

    def wait(self) -> None:
        """
        Sleep until the next request is allowed

        Takes the time already elapsed since the previous request into account.
        """
        current_time = time.monotonic()

        if self.last_request_time is not None:
            elapsed = current_time - self.last_request_time

            if elapsed < self.min_interval:
                sleep_duration = self.min_interval - elapsed
                logger.debug(f"Rate limiting: sleeping for {sleep_duration:.2f}s")
                time.sleep(sleep_duration)

        self.last_request_time = time.monotonic()
