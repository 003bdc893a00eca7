"""Utility modules for prayersync."""

from .time_of_day import TimeOfDay, parse_time_of_day

__all__ = [
    "TimeOfDay",
    "parse_time_of_day",
]
