"""Start-up choice between the hosted auth provider and the mock."""

from __future__ import annotations

import logging

from clicktales.auth.base import AuthProvider
from clicktales.auth.mock_auth import MockAuthService
from clicktales.auth.probe import is_supabase_available
from clicktales.config import settings

logger = logging.getLogger(__name__)


class MockAuthDisabledError(RuntimeError):
    """Raised when the provider is down and the mock may not stand in."""


async def select_auth_provider(
    remote: AuthProvider,
    mock: MockAuthService,
    *,
    production: bool | None = None,
) -> AuthProvider:
    """Probe the hosted provider once and return the backend to use.

    Falls back to *mock* (after restoring its persisted session) when the
    probe fails.  In production the fallback is refused.
    """
    if production is None:
        production = settings.is_production

    if await is_supabase_available():
        logger.info("Using %s auth backend", remote.name)
        return remote

    if production:
        raise MockAuthDisabledError(
            "Auth provider unreachable and mock auth is disabled in production"
        )

    logger.warning("Auth provider unreachable, falling back to mock auth")
    await mock.init()
    return mock
