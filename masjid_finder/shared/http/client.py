"""HTTP client with retries"""

from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..exceptions.errors import FetchTimeoutError, HTTPError
from ..logging.config import get_logger

logger = get_logger(__name__)


class HTTPClient:
    """
    requests session with urllib3 retries

    Every failure surfaces as HTTPError: transport errors without a status
    code, timeouts as FetchTimeoutError, and non-2xx responses with their
    status code unless the caller asks for the raw response.
    """

    def __init__(
        self,
        timeout: float = 20,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
        status_forcelist: tuple[int, ...] = (502, 503, 504),
        user_agent: Optional[str] = None,
        default_headers: Optional[dict[str, str]] = None,
    ):
        """
        Args:
            timeout: Request timeout (seconds)
            max_retries: Retries for connection errors and status_forcelist (0 disables)
            backoff_factor: Exponential backoff factor
            status_forcelist: Status codes that trigger a retry
            user_agent: User-Agent header
            default_headers: Extra headers sent with every request
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.user_agent = user_agent or "MasjidFinder/1.0"

        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=status_forcelist,
            allowed_methods=["HEAD", "GET", "POST", "OPTIONS"],
            # Hand the last response back instead of raising once retries run out
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)

        self.session = requests.Session()
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update({"User-Agent": self.user_agent, **(default_headers or {})})

    def request(
        self,
        method: str,
        url: str,
        raise_for_status: bool = True,
        **kwargs: Any,
    ) -> requests.Response:
        """
        Send a request

        Args:
            method: HTTP method
            url: Request URL
            raise_for_status: Raise HTTPError on a non-2xx status
            **kwargs: Passed to requests (params, data, json, headers)

        Returns:
            Response object

        Raises:
            FetchTimeoutError: The request timed out
            HTTPError: Transport failure, or non-2xx status when raise_for_status is set
        """
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as e:
            logger.error(f"{method} {url} timed out: {e}")
            raise FetchTimeoutError(f"{method} {url} timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise HTTPError(f"Failed to {method} {url}: {e}") from e

        logger.debug(f"{method} {url} -> {response.status_code}")

        if raise_for_status and not response.ok:
            logger.warning(f"{method} {url} returned status {response.status_code}")
            raise HTTPError(
                f"{method} {url} returned status {response.status_code}",
                status_code=response.status_code,
            )
        return response

    def get(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        raise_for_status: bool = True,
    ) -> requests.Response:
        return self.request("GET", url, raise_for_status, params=params, headers=headers)

    def post(
        self,
        url: str,
        data: Optional[Any] = None,
        json: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        raise_for_status: bool = True,
    ) -> requests.Response:
        return self.request("POST", url, raise_for_status, data=data, json=json, headers=headers)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
