"""Cache entry and cache key domain entities."""

from dataclasses import dataclass
from datetime import date

from prayersync.entities.coordinate import Coordinate
from prayersync.entities.prayer_times import PrayerTimeSet
from prayersync.methods import AsrSchool, CalculationMethod


@dataclass(frozen=True)
class CacheKey:
    """Identity of one day's prayer times.

    The date is the civil date in the location's own timezone, never the
    caller's.

    Attributes:
        coordinate: Location of the request
        civil_date: Date in the location's calendar
        method: Calculation method
        school: Asr juristic school
        precision: Decimal places used to round the coordinate
    """

    coordinate: Coordinate
    civil_date: date
    method: CalculationMethod
    school: AsrSchool = AsrSchool.STANDARD
    precision: int = 4

    def __str__(self) -> str:
        return (
            f"times:{self.coordinate.cache_token(self.precision)}:"
            f"{self.civil_date.isoformat()}:{int(self.method)}:{int(self.school)}"
        )


def metadata_key(coordinate: Coordinate, precision: int = 4) -> str:
    """Key under which a location's timezone identifier is stored."""
    return f"meta:{coordinate.cache_token(precision)}"


@dataclass(frozen=True)
class CacheEntry:
    """A cached value with its creation time.

    Attributes:
        value: Prayer times for time-data entries, a zone id for metadata entries
        created_at: Unix timestamp when the value was produced
    """

    value: PrayerTimeSet | str
    created_at: float

    def is_fresh(self, ttl: float | None, now: float) -> bool:
        """Check whether the entry is still within its TTL (None means no expiry)."""
        if ttl is None:
            return True
        return now - self.created_at < ttl

    @property
    def times(self) -> PrayerTimeSet:
        if not isinstance(self.value, PrayerTimeSet):
            raise TypeError("Cache entry does not hold prayer times")
        return self.value
