"""Calendar event domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from prayersync.entities.prayer_times import PrayerName

DEFAULT_DURATION = timedelta(minutes=30)
DEFAULT_ALARM_OFFSET = timedelta(minutes=15)
DEFAULT_CATEGORIES = ("Prayer", "Islamic")


def format_utc(instant: datetime) -> str:
    """Format an aware datetime as an iCalendar UTC value (YYYYMMDDTHHMMSSZ)."""
    return instant.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def derive_uid(prayer: PrayerName, start: datetime, domain: str) -> str:
    """Deterministic identifier: the same prayer at the same instant always gets the same UID."""
    return f"{prayer.value.lower()}-{format_utc(start)}@{domain}"


@dataclass(frozen=True)
class CalendarEvent:
    """One timed prayer event, built per export and never persisted.

    Attributes:
        prayer: The prayer this event marks
        start: UTC start instant (aware)
        end: UTC end instant (aware)
        uid: Globally unique, deterministic identifier
        summary: Event title
        description: Event body text
        location: Free-text location
        alarm_offset: How long before start the alarm fires, None for no alarm
        alarm_description: Text shown by the alarm
        categories: Category tags
    """

    prayer: PrayerName
    start: datetime
    end: datetime
    uid: str
    summary: str
    description: str = ""
    location: str = ""
    alarm_offset: timedelta | None = DEFAULT_ALARM_OFFSET
    alarm_description: str = ""
    categories: tuple[str, ...] = field(default=DEFAULT_CATEGORIES)

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("Calendar event instants must be timezone-aware")
        if self.end < self.start:
            raise ValueError("Calendar event cannot end before it starts")

    @classmethod
    def for_prayer(
        cls,
        prayer: PrayerName,
        start: datetime,
        uid_domain: str,
        duration: timedelta = DEFAULT_DURATION,
        alarm_offset: timedelta | None = DEFAULT_ALARM_OFFSET,
        location: str = "",
        discreet: bool = False,
    ) -> "CalendarEvent":
        """Build the standard event for a prayer starting at a UTC instant.

        Args:
            prayer: The prayer
            start: UTC start instant
            uid_domain: Domain part of the UID
            duration: Event length
            alarm_offset: Alarm lead time, None to omit the alarm
            location: Location text
            discreet: Use neutral "Personal Time" wording for shared calendars
        """
        name = prayer.value
        if discreet:
            summary = "Personal Time"
            description = f"Personal time block ({name} prayer)"
            alarm_subject = "Personal time"
        else:
            summary = f"{name} Prayer"
            description = f"Time for {name} prayer. May Allah accept your worship."
            alarm_subject = f"{name} prayer"

        alarm_description = ""
        if alarm_offset is not None:
            minutes = int(alarm_offset.total_seconds() // 60)
            alarm_description = f"{alarm_subject} in {minutes} minutes"

        start = start.astimezone(timezone.utc)
        return cls(
            prayer=prayer,
            start=start,
            end=start + duration,
            uid=derive_uid(prayer, start, uid_domain),
            summary=summary,
            description=description,
            location=location,
            alarm_offset=alarm_offset,
            alarm_description=alarm_description,
        )
