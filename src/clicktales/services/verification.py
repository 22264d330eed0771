"""Verification service — issues codes, hands them to delivery, redeems them."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from clicktales.otp.manager import OTPCheck, OTPManager
from clicktales.services.otp_delivery import OTPDeliveryClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssueResult:
    """Outcome of :meth:`VerificationService.issue`."""

    delivered: bool
    expires_in: int = 0


class VerificationService:
    """Email verification flow built on an :class:`OTPManager`.

    Flow
    ----
    1. ``issue`` generates a code, stores it and asks the relay to send it.
    2. If delivery fails the stored code is discarded.
    3. ``confirm`` redeems the code exactly once.
    """

    def __init__(self, otp_manager: OTPManager, delivery: OTPDeliveryClient) -> None:
        self._otp = otp_manager
        self._delivery = delivery

    async def issue(self, email: str, ttl_minutes: float | None = None) -> IssueResult:
        """Send a fresh code to *email*, replacing any outstanding one."""
        code = self._otp.generate()
        self._otp.store(email, code, ttl_minutes)
        logger.debug("OTP for %s: %s", email, code)

        if not await self._delivery.deliver(email, code):
            self._otp.clear(email)
            logger.error("Could not deliver OTP to %s", email)
            return IssueResult(delivered=False)

        logger.info("OTP issued to %s", email)
        return IssueResult(delivered=True, expires_in=self._otp.remaining_seconds(email))

    def confirm(self, email: str, code: str) -> bool:
        """Redeem *code* for *email*.  Every failure looks the same to callers."""
        outcome = self._otp.check(email, code.strip())
        if outcome is OTPCheck.VALID:
            logger.info("OTP verified for %s", email)
            return True
        logger.info("OTP verification failed for %s (%s)", email, outcome.value)
        return False

    def remaining_seconds(self, email: str) -> int:
        return self._otp.remaining_seconds(email)

    def cancel(self, email: str) -> None:
        """Discard any outstanding code for *email*."""
        self._otp.clear(email)
