"""Availability probe for the hosted auth/data provider."""

from __future__ import annotations

import asyncio
import logging

import httpx

from clicktales.config import settings

logger = logging.getLogger(__name__)


async def is_supabase_available(
    url: str | None = None,
    api_key: str | None = None,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    """Return ``True`` if the provider's REST endpoint answers with a 2xx.

    Issues a single ``HEAD`` request.  The whole call is bounded by
    *timeout* seconds; a timeout, transport error or non-2xx status all
    yield ``False``.  Nothing is retried.
    """
    endpoint = f"{(url or settings.supabase_url).rstrip('/')}/rest/v1/"
    key = api_key if api_key is not None else settings.supabase_anon_key
    limit = settings.probe_timeout_seconds if timeout is None else timeout

    try:
        async with asyncio.timeout(limit):
            async with httpx.AsyncClient(timeout=limit, transport=transport) as client:
                resp = await client.head(endpoint, headers={"apikey": key})
    except TimeoutError:
        logger.warning("Provider probe timed out after %ss", limit)
        return False
    except httpx.HTTPError as exc:
        logger.warning("Provider not available: %s", exc)
        return False

    if resp.is_success:
        logger.info("Provider is available")
        return True
    logger.warning("Provider probe returned %s", resp.status_code)
    return False
