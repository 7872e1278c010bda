"""Date and time helpers"""

from datetime import datetime

import pytz


def now_in(timezone_name: str) -> datetime:
    """
    Current time in the given timezone

    Args:
        timezone_name: IANA timezone name (e.g. "America/New_York")

    Returns:
        Timezone-aware datetime
    """
    return datetime.now(pytz.timezone(timezone_name))


def format_duration(seconds: float) -> str:
    """
    Format a duration for log output

    Args:
        seconds: Duration in seconds

    Returns:
        A string such as "850ms" or "2.31s"
    """
    if seconds < 1:
        return f"{int(seconds * 1000)}ms"
    return f"{seconds:.2f}s"
