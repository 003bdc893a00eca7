"""Upstream timings payload domain entity."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TimingsPayload:
    """The parts of a provider response the engine relies on.

    Attributes:
        timings: Prayer name to raw local time string, e.g. {"Fajr": "05:42 (BST)"}
        timezone: IANA zone identifier reported for the location
        raw_meta: Remaining location metadata, kept for diagnostics
    """

    timings: dict[str, str]
    timezone: str
    raw_meta: dict[str, Any] = field(default_factory=dict)
