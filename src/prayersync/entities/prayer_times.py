"""Prayer time domain entities."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from prayersync.errors import InvalidUpstreamPayload


class PrayerName(str, Enum):
    """Daily prayers, in chronological order."""

    FAJR = "Fajr"
    SUNRISE = "Sunrise"
    DHUHR = "Dhuhr"
    ASR = "Asr"
    MAGHRIB = "Maghrib"
    ISHA = "Isha"

    @property
    def is_event(self) -> bool:
        """Sunrise is informational only and never becomes a calendar event."""
        return self is not PrayerName.SUNRISE


EVENT_PRAYERS = tuple(p for p in PrayerName if p.is_event)

# Degraded, non-authoritative default used only when fully offline
FALLBACK_TIMES = {
    PrayerName.FAJR: "05:30",
    PrayerName.SUNRISE: "06:45",
    PrayerName.DHUHR: "12:00",
    PrayerName.ASR: "15:30",
    PrayerName.MAGHRIB: "17:15",
    PrayerName.ISHA: "18:45",
}


@dataclass(frozen=True, eq=True)
class PrayerTimeSet:
    """Local clock times ("HH:MM") for one date, location and method.

    Attributes:
        times: Mapping of prayer to local time string
        is_fallback: True only for the static offline default
    """

    times: Mapping[PrayerName, str]
    is_fallback: bool = False
    _ordered: tuple = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        missing = [p.value for p in EVENT_PRAYERS if p not in self.times]
        if missing:
            raise ValueError(f"Prayer times missing: {', '.join(missing)}")
        ordered = {p: self.times[p] for p in PrayerName if p in self.times}
        object.__setattr__(self, "times", MappingProxyType(ordered))
        object.__setattr__(self, "_ordered", tuple(ordered.items()))

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def from_timings(cls, timings: Mapping[str, str]) -> "PrayerTimeSet":
        """Build from a provider timings map, dropping decorations like " (BST)".

        Raises:
            InvalidUpstreamPayload: If a required prayer is missing or not a string
        """
        times: dict[PrayerName, str] = {}
        for prayer in PrayerName:
            raw = timings.get(prayer.value)
            if raw is None:
                if prayer.is_event:
                    raise InvalidUpstreamPayload(f"Timings missing {prayer.value}")
                continue
            if not isinstance(raw, str) or not raw.strip():
                raise InvalidUpstreamPayload(f"Timing for {prayer.value} is not a time string: {raw!r}")
            times[prayer] = raw.strip().split(" ")[0]
        return cls(times=times)

    @classmethod
    def from_dict(cls, data: Mapping[str, str], is_fallback: bool = False) -> "PrayerTimeSet":
        """Build from a {"Fajr": "05:42", ...} mapping (the serialized form)."""
        return cls(times={PrayerName(name): value for name, value in data.items()}, is_fallback=is_fallback)

    @classmethod
    def fallback(cls) -> "PrayerTimeSet":
        """The documented offline default set."""
        return cls(times=dict(FALLBACK_TIMES), is_fallback=True)

    def get(self, prayer: PrayerName) -> str | None:
        return self.times.get(prayer)

    def events(self) -> Iterator[tuple[PrayerName, str]]:
        """Yield (prayer, local time) for the prayers that become events."""
        for prayer, value in self._ordered:
            if prayer.is_event:
                yield prayer, value

    def to_dict(self) -> dict[str, str]:
        return {prayer.value: value for prayer, value in self._ordered}
