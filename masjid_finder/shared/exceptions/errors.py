"""Custom exceptions"""
from typing import Optional


class MasjidFinderError(Exception):
    """Base exception"""

    pass


class HTTPError(MasjidFinderError):
    """HTTP transport or status error"""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code  # None for transport failures


class FetchTimeoutError(HTTPError):
    """The request did not complete within its timeout"""

    pass


class FetchCancelledError(MasjidFinderError):
    """The fetch session was superseded by a newer one"""

    pass


class GeocodingError(MasjidFinderError):
    """Geocoding error"""

    pass


class NotificationError(MasjidFinderError):
    """Notification error"""

    pass


class ConfigurationError(MasjidFinderError):
    """Configuration error"""

    pass


class ValidationError(MasjidFinderError):
    """Validation error"""

    pass
