"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from prayersync.config import configure_logging, settings
from prayersync.handlers import CalendarHandler
from prayersync.repositories import AladhanTimingsProvider, create_durable_store
from prayersync.services import PrayerCalendarService, TieredTimeCache

logger = logging.getLogger(__name__)


def get_calendar_service(request: Request) -> PrayerCalendarService:
    """Dependency injection for PrayerCalendarService from app.state.

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "calendar_service", None)
    if service is None:
        raise RuntimeError("PrayerCalendarService not initialized. Check lifespan setup.")
    return service


def get_handler(request: Request) -> CalendarHandler:
    """Dependency injection for CalendarHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The CalendarHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "calendar_handler", None)
    if handler is None:
        raise RuntimeError("CalendarHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Repositories (provider, durable store) - created explicitly
    2. Services (cache, calendar export) - stored in app.state
    3. Handler (HTTP endpoints) - stored in app.state.calendar_handler

    Cleanup:
        Closes network clients and removes all services from app.state
    """
    configure_logging()

    provider = AladhanTimingsProvider.create()
    store = create_durable_store()

    cache = TieredTimeCache.create(provider=provider, store=store)
    calendar_service = PrayerCalendarService.create(cache=cache)
    calendar_handler = CalendarHandler(
        cache=cache,
        calendar_service=calendar_service,
        store=store,
        provider=provider,
    )

    app.state.cache = cache
    app.state.calendar_service = calendar_service
    app.state.calendar_handler = calendar_handler

    logger.info(f"Durable backend: {settings.durable_backend}")
    logger.info(f"Upstream: {provider.base_url}")
    logger.info(f"Store healthy: {await store.health_check()}")

    yield

    await provider.close()
    close_store = getattr(store, "close", None)
    if close_store is not None:
        await close_store()

    del app.state.calendar_handler
    del app.state.calendar_service
    del app.state.cache
    logger.info("PrayerSync API shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[CalendarHandler, Depends(get_handler)]
ServiceDep = Annotated[PrayerCalendarService, Depends(get_calendar_service)]
