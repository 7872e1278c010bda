"""Domain models for the mosque details panel"""
from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class PrayerTime:
    """Adhan and iqama times of one prayer"""

    name: str  # Fajr, Dhuhr, ...
    adhan: str  # e.g. "5:30 AM"
    iqama: str
    is_jumuah: bool = False


@dataclass
class MosqueDetails:
    """Everything the details panel shows for one mosque"""

    name: str
    address: str
    latitude: float
    longitude: float
    source: str
    phone: Optional[str] = None
    website: Optional[str] = None
    schedule_date: Optional[date] = None  # "today" in the configured timezone
    prayer_times: list[PrayerTime] = field(default_factory=list)

    @property
    def directions_url(self) -> str:
        return (
            "https://www.google.com/maps/dir/?api=1"
            f"&destination={self.latitude},{self.longitude}"
        )

    def render(self) -> str:
        """Plain-text panel"""
        lines = [self.name, self.address, ""]

        heading = "Today's Prayer Times"
        if self.schedule_date:
            heading += f" ({self.schedule_date.isoformat()})"
        lines.append(heading)
        for prayer in self.prayer_times:
            lines.append(f"  {prayer.name:<8} Adhan {prayer.adhan:>8}   Iqama {prayer.iqama:>8}")

        lines.append("")
        lines.append("Contact Info")
        if self.phone:
            lines.append(f"  Phone:      {self.phone}")
        if self.website:
            lines.append(f"  Website:    {self.website}")
        lines.append(f"  Directions: {self.directions_url}")

        return "\n".join(lines)
