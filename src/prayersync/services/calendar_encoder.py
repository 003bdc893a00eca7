"""iCalendar (RFC 5545) serialization of prayer events."""

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from prayersync.entities import CalendarEvent, format_utc

PRODID = "-//PrayerSync//Prayer Times Calendar//EN"
CRLF = "\r\n"
MAX_LINE_OCTETS = 75


def escape_text(value: str) -> str:
    """Escape a TEXT property value (backslash, semicolon, comma, newline)."""
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
        .replace("\r", "\\n")
    )


def fold_line(line: str) -> str:
    """Fold a content line at 75 octets.

    Continuation lines start with a single space, which counts towards their
    75 octets. Multi-byte UTF-8 characters are never split.
    """
    if len(line.encode("utf-8")) <= MAX_LINE_OCTETS:
        return line

    segments: list[str] = []
    current: list[str] = []
    used = 0
    limit = MAX_LINE_OCTETS
    for char in line:
        size = len(char.encode("utf-8"))
        if used + size > limit:
            segments.append("".join(current))
            current = []
            used = 0
            limit = MAX_LINE_OCTETS - 1
        current.append(char)
        used += size
    segments.append("".join(current))
    return (CRLF + " ").join(segments)


def format_trigger(offset: timedelta) -> str:
    """Negative duration before the event start, e.g. -PT15M."""
    minutes = int(offset.total_seconds() // 60)
    return f"-PT{minutes}M"


class CalendarEncoder:
    """Stateless encoder from CalendarEvent values to an .ics document.

    Given a fixed generated_at, the same events always encode to the same
    bytes.

    Example:
        ```python
        encoder = CalendarEncoder()
        document = encoder.encode(events, "Prayer Times", "Daily prayers")
        ```
    """

    def __init__(self, prodid: str = PRODID) -> None:
        self._prodid = prodid

    def encode(
        self,
        events: Iterable[CalendarEvent],
        calendar_title: str,
        calendar_description: str,
        generated_at: datetime | None = None,
    ) -> str:
        """Serialize events into a VCALENDAR document.

        Args:
            events: Events in the order they should appear
            calendar_title: X-WR-CALNAME value
            calendar_description: X-WR-CALDESC value
            generated_at: DTSTAMP for every event; defaults to now (UTC)

        Returns:
            The document, CRLF line endings, folded lines
        """
        stamp = format_utc(generated_at or datetime.now(timezone.utc))

        lines = [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            f"PRODID:{self._prodid}",
            "CALSCALE:GREGORIAN",
            "METHOD:PUBLISH",
            f"X-WR-CALNAME:{escape_text(calendar_title)}",
            f"X-WR-CALDESC:{escape_text(calendar_description)}",
            "X-WR-TIMEZONE:UTC",
        ]
        for event in events:
            lines.extend(self._event_lines(event, stamp))
        lines.append("END:VCALENDAR")

        return "".join(fold_line(line) + CRLF for line in lines)

    @staticmethod
    def _event_lines(event: CalendarEvent, stamp: str) -> list[str]:
        lines = [
            "BEGIN:VEVENT",
            f"UID:{event.uid}",
            f"DTSTAMP:{stamp}",
            f"DTSTART:{format_utc(event.start)}",
            f"DTEND:{format_utc(event.end)}",
            f"SUMMARY:{escape_text(event.summary)}",
            f"DESCRIPTION:{escape_text(event.description)}",
            f"LOCATION:{escape_text(event.location)}",
            f"CATEGORIES:{','.join(escape_text(c) for c in event.categories)}",
            "STATUS:CONFIRMED",
            "TRANSP:OPAQUE",
        ]
        if event.alarm_offset is not None:
            lines.extend([
                "BEGIN:VALARM",
                f"TRIGGER:{format_trigger(event.alarm_offset)}",
                "ACTION:DISPLAY",
                f"DESCRIPTION:{escape_text(event.alarm_description)}",
                "END:VALARM",
            ])
        lines.append("END:VEVENT")
        return lines
