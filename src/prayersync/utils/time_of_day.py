"""Strict local time-of-day parsing."""

from typing import NamedTuple

from prayersync.errors import InvalidTimeString


class TimeOfDay(NamedTuple):
    """A wall-clock time with no date or zone."""

    hour: int
    minute: int
    second: int = 0

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"


def parse_time_of_day(value: str) -> TimeOfDay:
    """Parse "HH:MM" or "HH:MM:SS" (24-hour clock).

    The hour may be one or two digits; minutes and seconds must be two.
    Surrounding whitespace is ignored, anything else is rejected.

    Args:
        value: The time string

    Returns:
        The parsed TimeOfDay

    Raises:
        InvalidTimeString: If the value is not a valid time of day
    """
    if not isinstance(value, str):
        raise InvalidTimeString(value)

    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise InvalidTimeString(value)

    hour_text, minute_text, *rest = parts
    second_text = rest[0] if rest else "00"

    if not (1 <= len(hour_text) <= 2 and len(minute_text) == 2 and len(second_text) == 2):
        raise InvalidTimeString(value)
    if not all(part.isascii() and part.isdigit() for part in (hour_text, minute_text, second_text)):
        raise InvalidTimeString(value)

    hour, minute, second = int(hour_text), int(minute_text), int(second_text)
    if hour > 23 or minute > 59 or second > 59:
        raise InvalidTimeString(value)

    return TimeOfDay(hour, minute, second)
