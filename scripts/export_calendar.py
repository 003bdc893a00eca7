#!/usr/bin/env python3
"""
Export a prayer-time calendar to an .ics file.

Example:
    python scripts/export_calendar.py 51.5074 -0.1278 --days 30 --method ISNA
"""

import argparse
import asyncio
from pathlib import Path

from prayersync import Coordinate, PrayerCalendarService, TieredTimeCache, configure_logging
from prayersync.config import settings
from prayersync.repositories import AladhanTimingsProvider, create_durable_store


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export prayer times as an iCalendar file")
    parser.add_argument("latitude", type=float)
    parser.add_argument("longitude", type=float)
    parser.add_argument("--days", type=int, default=settings.default_export_days)
    parser.add_argument("--method", default=None, help="Method id or name (MWL, ISNA, Karachi, ...)")
    parser.add_argument("--school", default=None, help="Asr school: standard (0) or hanafi (1)")
    parser.add_argument("--discreet", action="store_true", help="Neutral 'Personal Time' wording")
    parser.add_argument("--location", default=None, help="LOCATION text for each event")
    parser.add_argument("--output", "-o", type=Path, default=None, help="Output path")
    return parser.parse_args()


async def export(args: argparse.Namespace) -> None:
    provider = AladhanTimingsProvider.create()
    store = create_durable_store()
    try:
        cache = TieredTimeCache.create(provider=provider, store=store)
        service = PrayerCalendarService.create(cache=cache)

        result = await service.export(
            Coordinate(args.latitude, args.longitude),
            days=args.days,
            method=args.method,
            school=args.school,
            location_label=args.location,
            discreet=args.discreet,
        )
    finally:
        await provider.close()
        close_store = getattr(store, "close", None)
        if close_store is not None:
            await close_store()

    output = args.output or Path(result.filename)
    output.write_text(result.document, encoding="utf-8", newline="")

    print_section("Calendar exported")
    print(f"  File:      {output}")
    print(f"  Timezone:  {result.timezone}")
    print(f"  Days:      {result.days} from {result.start_date.isoformat()}")
    print(f"  Events:    {result.event_count}")
    if result.degraded:
        print("  ⚠️ Some times are fallback defaults; re-export when online")


def main() -> None:
    configure_logging()
    asyncio.run(export(parse_args()))


if __name__ == "__main__":
    main()
