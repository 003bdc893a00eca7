"""
Tests for the AlAdhan timings provider against a mocked transport.
"""

from datetime import date

import httpx
import pytest

from prayersync.errors import InvalidUpstreamPayload, MetadataMissing, UpstreamUnavailable
from prayersync.methods import AsrSchool, CalculationMethod
from prayersync.repositories import AladhanTimingsProvider

from conftest import LONDON, LONDON_TIMINGS

BASE_URL = "https://api.aladhan.test/v1"


def ok_body(timings=None, zone="Europe/London"):
    meta = {"latitude": 51.5074, "longitude": -0.1278, "method": {"id": 3}}
    if zone is not None:
        meta["timezone"] = zone
    return {"code": 200, "status": "OK", "data": {"timings": timings or LONDON_TIMINGS, "meta": meta}}


def make_provider(handler) -> AladhanTimingsProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AladhanTimingsProvider(base_url=BASE_URL, timeout=5.0, user_agent="PrayerSync/1.0 (test)", client=client)


@pytest.mark.asyncio
async def test_fetch_builds_request_and_parses_payload():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=ok_body())

    provider = make_provider(handler)
    payload = await provider.fetch_timings(date(2025, 6, 13), LONDON, CalculationMethod.ISNA)

    assert payload.timezone == "Europe/London"
    assert payload.timings["Fajr"] == "02:58"
    assert "timezone" not in payload.raw_meta

    request = seen[0]
    assert request.url.path == "/v1/timings/13-06-2025"
    assert request.url.params["latitude"] == "51.5074"
    assert request.url.params["longitude"] == "-0.1278"
    assert request.url.params["method"] == "2"
    assert request.url.params["school"] == "0"
    assert request.headers["User-Agent"] == "PrayerSync/1.0 (test)"
    await provider.close()


@pytest.mark.asyncio
async def test_fetch_sends_asr_school():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=ok_body())

    provider = make_provider(handler)
    await provider.fetch_timings(date(2025, 6, 13), LONDON, CalculationMethod.KARACHI, AsrSchool.HANAFI)

    assert seen[0].url.params["method"] == "1"
    assert seen[0].url.params["school"] == "1"
    await provider.close()


@pytest.mark.asyncio
async def test_non_success_status_is_unavailable():
    provider = make_provider(lambda request: httpx.Response(503, text="maintenance"))
    with pytest.raises(UpstreamUnavailable):
        await provider.fetch_timings(date(2025, 6, 13), LONDON, CalculationMethod.MWL)


@pytest.mark.asyncio
async def test_transport_error_is_unavailable():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    provider = make_provider(handler)
    with pytest.raises(UpstreamUnavailable):
        await provider.fetch_timings(date(2025, 6, 13), LONDON, CalculationMethod.MWL)


@pytest.mark.asyncio
async def test_timeout_is_unavailable():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    provider = make_provider(handler)
    with pytest.raises(UpstreamUnavailable):
        await provider.fetch_timings(date(2025, 6, 13), LONDON, CalculationMethod.MWL)


@pytest.mark.asyncio
async def test_non_json_body_is_invalid_payload():
    provider = make_provider(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(InvalidUpstreamPayload):
        await provider.fetch_timings(date(2025, 6, 13), LONDON, CalculationMethod.MWL)


@pytest.mark.asyncio
async def test_missing_timings_is_invalid_payload():
    body = {"code": 200, "data": {"meta": {"timezone": "Europe/London"}}}
    provider = make_provider(lambda request: httpx.Response(200, json=body))
    with pytest.raises(InvalidUpstreamPayload):
        await provider.fetch_timings(date(2025, 6, 13), LONDON, CalculationMethod.MWL)


@pytest.mark.asyncio
async def test_error_code_in_body_is_invalid_payload():
    body = {"code": 400, "status": "BAD_REQUEST", "data": "Invalid date"}
    provider = make_provider(lambda request: httpx.Response(200, json=body))
    with pytest.raises(InvalidUpstreamPayload):
        await provider.fetch_timings(date(2025, 6, 13), LONDON, CalculationMethod.MWL)


@pytest.mark.asyncio
async def test_missing_timezone_is_metadata_missing():
    provider = make_provider(lambda request: httpx.Response(200, json=ok_body(zone=None)))
    with pytest.raises(MetadataMissing):
        await provider.fetch_timings(date(2025, 6, 13), LONDON, CalculationMethod.MWL)


@pytest.mark.asyncio
async def test_is_available():
    assert await make_provider(lambda request: httpx.Response(200, json=ok_body())).is_available()
    assert not await make_provider(lambda request: httpx.Response(500)).is_available()
