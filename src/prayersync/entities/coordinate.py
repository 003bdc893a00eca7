"""Coordinate domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Coordinate:
    """A geographic location in floating point degrees.

    Attributes:
        latitude: Degrees north, -90 to 90
        longitude: Degrees east, -180 to 180
    """

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude must be between -90 and 90, got {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude must be between -180 and 180, got {self.longitude}")

    def cache_token(self, precision: int = 4) -> str:
        """Stable identity used in cache keys, e.g. "51.5074:-0.1278"."""
        return f"{self.latitude:.{precision}f}:{self.longitude:.{precision}f}"

    def label(self) -> str:
        """Display text for calendar LOCATION fields."""
        return f"{self.latitude:.4f}, {self.longitude:.4f}"
