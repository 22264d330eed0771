"""Mail relay — companion service that emails OTP codes.

Endpoints
---------
POST /send-otp   → deliver ``otpCode`` to ``email``
GET  /health     → liveness probe
"""

from __future__ import annotations

import logging
import re
from typing import Any

import aiosmtplib
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from clicktales.config import settings
from clicktales.services.email_service import EmailService
from clicktales.services.rate_limiter import RateLimiter

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class SendOTPRequest(BaseModel):
    # Validated in the handler; malformed values answer 400
    email: Any = None
    otpCode: Any = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def create_relay_app(
    email_service: EmailService | None = None,
    rate_limiter: RateLimiter | None = None,
) -> FastAPI:
    """Build the relay app with its own mailer and per-email rate limit."""
    app = FastAPI(
        title=f"{settings.app_name} Mail Relay",
        description="Delivers one-time verification codes by email",
        version="0.1.0",
    )
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    app.state.email_service = email_service or EmailService()
    app.state.rate_limiter = rate_limiter or RateLimiter(
        max_requests=settings.relay_rate_limit_max,
        window_seconds=settings.relay_rate_limit_window_seconds,
    )

    @app.post("/send-otp")
    async def send_otp(body: SendOTPRequest, request: Request):
        """Validate the request, apply the rate limit and send the email."""
        if not body.email or not body.otpCode:
            return _error(400, "Email and OTP code are required")

        if not isinstance(body.otpCode, (str, int)) or isinstance(body.otpCode, bool):
            return _error(400, "Invalid OTP code")
        otp_code = str(body.otpCode)

        if not isinstance(body.email, str) or not EMAIL_PATTERN.match(body.email):
            logger.info("Rejected malformed email %r", body.email)
            return _error(400, "Invalid email format")

        if not request.app.state.rate_limiter.allow(body.email):
            logger.warning("Rate limit exceeded for %s", body.email)
            return _error(429, "Too many OTP requests. Please try again later.")

        try:
            await request.app.state.email_service.send_otp_code(body.email, otp_code)
        except (aiosmtplib.SMTPException, OSError) as exc:
            logger.error("OTP send error for %s: %s", body.email, exc)
            return _error(500, "Failed to send OTP email")

        return {"success": True}

    @app.get("/health")
    async def health_check():
        """Simple liveness probe."""
        return {"status": "healthy", "app": app.title}

    return app


app = create_relay_app()
