"""Tests for the application lifespan — startup wiring and sweep shutdown."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI

from clicktales.auth.mock_auth import MockAuthService
from clicktales.auth.selector import MockAuthDisabledError
from clicktales.main import lifespan
from clicktales.otp.manager import SWEEP_TASK_NAME
from clicktales.storage.kv_store import InMemoryKeyValueStore


def sweep_tasks() -> list[asyncio.Task]:
    return [
        t for t in asyncio.all_tasks() if t.get_name() == SWEEP_TASK_NAME and not t.done()
    ]


@pytest.mark.asyncio
async def test_lifespan_starts_and_stops_sweep():
    app = FastAPI()
    mock = MockAuthService(InMemoryKeyValueStore())

    with patch("clicktales.main.init_db", AsyncMock()), patch(
        "clicktales.main.select_auth_provider", AsyncMock(return_value=mock)
    ):
        async with lifespan(app):
            assert app.state.auth_provider is mock
            assert len(sweep_tasks()) == 1

    assert sweep_tasks() == []


@pytest.mark.asyncio
async def test_failed_auth_selection_leaves_no_sweep_running():
    app = FastAPI()

    with patch("clicktales.main.init_db", AsyncMock()), patch(
        "clicktales.main.select_auth_provider",
        AsyncMock(side_effect=MockAuthDisabledError("provider down")),
    ):
        with pytest.raises(MockAuthDisabledError):
            async with lifespan(app):
                pass

    assert sweep_tasks() == []
