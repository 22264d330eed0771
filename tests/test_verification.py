"""Tests for the VerificationService and the OTP delivery client."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from clicktales.otp.manager import OTPManager
from clicktales.services.otp_delivery import OTPDeliveryClient
from clicktales.services.verification import VerificationService


@pytest.fixture
def delivery():
    """Mocked delivery client — never talks to the relay."""
    client = OTPDeliveryClient(base_url="http://relay.test")
    client.deliver = AsyncMock(return_value=True)
    return client


@pytest.fixture
def otp_manager():
    return OTPManager(code_width=5)


@pytest.mark.asyncio
async def test_issue_and_confirm(otp_manager, delivery):
    service = VerificationService(otp_manager, delivery)

    result = await service.issue("Carol@Example.com")

    assert result.delivered is True
    assert 0 < result.expires_in <= 600
    email, code = delivery.deliver.call_args.args
    assert email == "Carol@Example.com"
    assert len(code) == 5 and code.isdigit()

    assert service.confirm("carol@example.com", f" {code} ") is True
    assert service.confirm("carol@example.com", code) is False


@pytest.mark.asyncio
async def test_failed_delivery_discards_code(otp_manager, delivery):
    delivery.deliver.return_value = False
    service = VerificationService(otp_manager, delivery)

    result = await service.issue("carol@example.com")

    assert result.delivered is False
    assert service.remaining_seconds("carol@example.com") == 0
    _, code = delivery.deliver.call_args.args
    assert service.confirm("carol@example.com", code) is False


@pytest.mark.asyncio
async def test_reissue_replaces_code_and_cancel(otp_manager, delivery):
    service = VerificationService(otp_manager, delivery)

    await service.issue("dan@example.com")
    _, first = delivery.deliver.call_args.args
    await service.issue("dan@example.com")
    _, second = delivery.deliver.call_args.args

    if first != second:
        assert service.confirm("dan@example.com", first) is False
    service.cancel("dan@example.com")
    assert service.confirm("dan@example.com", second) is False


# ── Delivery client ──────────────────────────────────────

@pytest.mark.asyncio
async def test_delivery_client_posts_to_relay():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"success": True})

    client = OTPDeliveryClient("http://relay.test/", transport=httpx.MockTransport(handler))

    assert await client.deliver("bob@example.com", "12345") is True
    assert str(requests[0].url) == "http://relay.test/send-otp"
    assert json.loads(requests[0].content) == {"email": "bob@example.com", "otpCode": "12345"}


@pytest.mark.asyncio
async def test_delivery_client_reports_relay_rejection():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(429, json={"success": False, "error": "Too many"})
    )
    client = OTPDeliveryClient("http://relay.test", transport=transport)
    assert await client.deliver("bob@example.com", "12345") is False


@pytest.mark.asyncio
async def test_delivery_client_handles_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = OTPDeliveryClient("http://relay.test", transport=httpx.MockTransport(handler))
    assert await client.deliver("bob@example.com", "12345") is False


@pytest.mark.parametrize(
    "reply",
    [
        httpx.Response(200, text="<html>ok</html>", headers={"content-type": "text/html"}),
        httpx.Response(200, json=["success"]),
    ],
)
@pytest.mark.asyncio
async def test_delivery_client_rejects_malformed_relay_reply(reply):
    client = OTPDeliveryClient("http://relay.test", transport=httpx.MockTransport(lambda r: reply))
    assert await client.deliver("bob@example.com", "12345") is False


@pytest.mark.asyncio
async def test_malformed_relay_reply_discards_issued_code(otp_manager):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>ok</html>"))
    service = VerificationService(
        otp_manager, OTPDeliveryClient("http://relay.test", transport=transport)
    )

    result = await service.issue("a@b.com")

    assert result.delivered is False
    assert len(otp_manager) == 0
