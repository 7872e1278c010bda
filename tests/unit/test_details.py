"""Tests for the mosque details panel"""

from datetime import date

from masjid_finder.features.details.services.details_builder import (
    NO_ADDRESS,
    PLACEHOLDER_PRAYER_TIMES,
    UNKNOWN_NAME,
    build_details,
    format_address,
)
from masjid_finder.features.places.domain.models import GeoPoint


def test_full_record() -> None:
    """Every available field reaches the panel"""
    point = GeoPoint(
        40.7,
        -74.0,
        tags={
            "name": "Masjid Al-Noor",
            "addr:street": "1 Main St",
            "addr:city": "New York",
            "addr:state": "NY",
            "addr:postcode": "10001",
            "phone": "555-0100",
            "website": "https://example.org",
            "source": "MasjidiAPI",
        },
    )

    details = build_details(point)

    assert details.name == "Masjid Al-Noor"
    assert details.address == "1 Main St, New York, NY, 10001"
    assert details.phone == "555-0100"
    assert details.website == "https://example.org"
    assert details.source == "MasjidiAPI"
    assert details.schedule_date is None


def test_fallbacks_for_missing_fields() -> None:
    """Missing name and address use placeholders; OSM is the default source"""
    details = build_details(GeoPoint(40.7, -74.0))

    assert details.name == UNKNOWN_NAME
    assert details.address == NO_ADDRESS
    assert details.phone is None
    assert details.source == "OpenStreetMap"


def test_english_name_fallback() -> None:
    """name:en is used when there is no name"""
    details = build_details(GeoPoint(40.7, -74.0, tags={"name:en": "Grand Mosque"}))
    assert details.name == "Grand Mosque"


def test_partial_address() -> None:
    """Missing address parts are skipped"""
    assert format_address({"addr:city": "Paterson", "addr:state": "NJ"}) == "Paterson, NJ"


def test_placeholder_schedule() -> None:
    """Six prayers with Jumuah last"""
    details = build_details(GeoPoint(40.7, -74.0))

    assert [p.name for p in details.prayer_times] == ["Fajr", "Dhuhr", "Asr", "Maghrib", "Isha", "Jumuah"]
    assert details.prayer_times[-1].is_jumuah
    assert details.prayer_times == list(PLACEHOLDER_PRAYER_TIMES)


def test_schedule_date_in_timezone() -> None:
    """With a timezone the panel is dated"""
    details = build_details(GeoPoint(40.7, -74.0), timezone_name="America/New_York")
    assert isinstance(details.schedule_date, date)


def test_directions_url_and_render() -> None:
    """Directions link to the coordinates; render lists the schedule and contact info"""
    details = build_details(GeoPoint(40.7, -74.0, tags={"name": "Masjid", "phone": "555"}))

    assert details.directions_url == "https://www.google.com/maps/dir/?api=1&destination=40.7,-74.0"

    text = details.render()
    assert text.startswith("Masjid\n")
    assert "Today's Prayer Times" in text
    assert "Jumuah" in text
    assert "Phone:      555" in text
    assert "Website" not in text
    assert details.directions_url in text
