"""OTP router — issue, verify and inspect email verification codes.

Endpoints
---------
POST /otp/send                 → issue a code and deliver it by email
POST /otp/verify               → redeem a code
GET  /otp/remaining?email=...  → seconds until the outstanding code expires
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel

from clicktales.services.verification import VerificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/otp", tags=["otp"])


def get_verification_service(request: Request) -> VerificationService:
    return request.app.state.verification


# ── Response / request models ────────────────────────────

class OTPSendRequest(BaseModel):
    email: str


class OTPSendResponse(BaseModel):
    success: bool
    message: str
    expires_in: int = 0


class OTPVerifyRequest(BaseModel):
    email: str
    code: str


class OTPVerifyResponse(BaseModel):
    valid: bool


class OTPRemainingResponse(BaseModel):
    remaining_seconds: int


# ── Endpoints ────────────────────────────────────────────

@router.post("/send", response_model=OTPSendResponse)
async def send_otp(
    body: OTPSendRequest,
    service: VerificationService = Depends(get_verification_service),
):
    """Generate a code for the given email and hand it to the mail relay."""
    result = await service.issue(body.email)
    if not result.delivered:
        raise HTTPException(status_code=502, detail="Failed to send verification code")
    return OTPSendResponse(
        success=True,
        message=f"Verification code sent to {body.email}",
        expires_in=result.expires_in,
    )


@router.post("/verify", response_model=OTPVerifyResponse)
async def verify_otp(
    body: OTPVerifyRequest,
    service: VerificationService = Depends(get_verification_service),
):
    """Validate a code.  Missing, expired and wrong codes all report ``valid=false``."""
    return OTPVerifyResponse(valid=service.confirm(body.email, body.code))


@router.get("/remaining", response_model=OTPRemainingResponse)
async def remaining_time(
    email: str = Query(..., description="Email the code was sent to"),
    service: VerificationService = Depends(get_verification_service),
):
    return OTPRemainingResponse(remaining_seconds=service.remaining_seconds(email))
