"""Tests for the provider availability probe."""

from __future__ import annotations

import asyncio
import time

import httpx
import pytest

from clicktales.auth.probe import is_supabase_available

BASE_URL = "https://example.supabase.co"


@pytest.mark.asyncio
async def test_available_on_2xx():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    ok = await is_supabase_available(
        BASE_URL, api_key="anon", transport=httpx.MockTransport(handler)
    )

    assert ok is True
    assert seen[0].method == "HEAD"
    assert str(seen[0].url) == f"{BASE_URL}/rest/v1/"
    assert seen[0].headers["apikey"] == "anon"


@pytest.mark.asyncio
async def test_unavailable_on_error_status():
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    assert await is_supabase_available(BASE_URL, api_key="anon", transport=transport) is False


@pytest.mark.asyncio
async def test_unavailable_on_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    transport = httpx.MockTransport(handler)
    assert await is_supabase_available(BASE_URL, api_key="anon", transport=transport) is False


@pytest.mark.asyncio
async def test_unavailable_after_timeout_without_hanging():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(30)
        return httpx.Response(200)

    started = time.monotonic()
    ok = await is_supabase_available(
        BASE_URL, api_key="anon", timeout=0.2, transport=httpx.MockTransport(handler)
    )

    assert ok is False
    assert time.monotonic() - started < 2
