"""Build the details panel for a selected mosque"""

from typing import Optional

from ....shared.utils.datetime_utils import now_in
from ...places.domain.models import GeoPoint
from ..domain.models import MosqueDetails, PrayerTime

UNKNOWN_NAME = "Unknown Mosque"
NO_ADDRESS = "Address not available"

ADDRESS_TAGS: tuple[str, ...] = ("addr:street", "addr:city", "addr:state", "addr:postcode")

# Neither source publishes prayer times yet, so every mosque shows this schedule
PLACEHOLDER_PRAYER_TIMES: tuple[PrayerTime, ...] = (
    PrayerTime("Fajr", "5:30 AM", "6:00 AM"),
    PrayerTime("Dhuhr", "1:15 PM", "1:30 PM"),
    PrayerTime("Asr", "4:45 PM", "5:15 PM"),
    PrayerTime("Maghrib", "7:30 PM", "7:35 PM"),
    PrayerTime("Isha", "9:00 PM", "9:15 PM"),
    PrayerTime("Jumuah", "1:00 PM", "1:30 PM", is_jumuah=True),
)


def format_address(tags: dict[str, str]) -> str:
    """
    Join the address tags into one line

    Args:
        tags: OSM-style tags

    Returns:
        str: "street, city, state, postcode" (missing parts skipped)
    """
    parts = [tags[key] for key in ADDRESS_TAGS if tags.get(key)]
    return ", ".join(parts) if parts else NO_ADDRESS


def build_details(point: GeoPoint, timezone_name: Optional[str] = None) -> MosqueDetails:
    """
    Build the details panel of a mosque

    Args:
        point: Selected mosque
        timezone_name: Timezone for the schedule date (no date when None)

    Returns:
        MosqueDetails: Panel contents
    """
    tags = point.tags

    return MosqueDetails(
        name=point.display_name or UNKNOWN_NAME,
        address=format_address(tags),
        latitude=point.latitude,
        longitude=point.longitude,
        source=point.source,
        phone=tags.get("phone"),
        website=tags.get("website"),
        schedule_date=now_in(timezone_name).date() if timezone_name else None,
        prayer_times=list(PLACEHOLDER_PRAYER_TIMES),
    )
