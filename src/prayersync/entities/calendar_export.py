"""Calendar export result entity."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class CalendarExport:
    """An encoded calendar and what went into it.

    Attributes:
        document: The .ics text (CRLF line endings)
        timezone: Zone the local times were interpreted in
        event_count: Number of VEVENTs in the document
        start_date: First civil date covered
        days: Number of days covered
        degraded: True if the zone fell back to UTC or any day used fallback times
    """

    document: str
    timezone: str
    event_count: int
    start_date: date
    days: int
    degraded: bool = False

    @property
    def filename(self) -> str:
        """Suggested download name, e.g. PrayerSync-2025-06-13.ics."""
        return f"PrayerSync-{self.start_date.isoformat()}.ics"
