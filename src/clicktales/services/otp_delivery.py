"""OTP delivery client — async HTTP client for the mail relay.

The relay owns formatting and transport; this client only hands over the
target address and the code.
"""

from __future__ import annotations

import logging

import httpx

from clicktales.config import settings

logger = logging.getLogger(__name__)


class OTPDeliveryClient:
    """Async HTTP wrapper around the relay's ``POST /send-otp`` endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.relay_base_url).rstrip("/")
        self._transport = transport

    async def deliver(self, email: str, code: str) -> bool:
        """Ask the relay to email *code* to *email*.

        Returns ``True`` if the relay reports success.
        """
        url = f"{self._base_url}/send-otp"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.post(url, json={"email": email, "otpCode": code})
            if resp.status_code == 200:
                try:
                    data = resp.json()
                except ValueError:
                    logger.error("OTP delivery got a non-JSON reply: %s", resp.text[:200])
                    return False
                if not isinstance(data, dict):
                    logger.error("OTP delivery got an unexpected reply: %r", data)
                    return False
                return bool(data.get("success", False))
            logger.error("OTP delivery failed: %s %s", resp.status_code, resp.text)
            return False
        except httpx.HTTPError as exc:
            logger.exception("OTP delivery request error: %s", exc)
            return False
