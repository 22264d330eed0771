"""Auth router — thin HTTP surface over the active auth backend.

Endpoints
---------
POST /auth/sign-in    → email + password sign-in
POST /auth/sign-up    → register a new account
POST /auth/sign-out   → end the current session
GET  /auth/session    → current session, if any
"""

from __future__ import annotations

from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from clicktales.auth.base import AuthProvider
from clicktales.auth.results import AuthErrorKind, AuthFailure
from clicktales.auth.schemas import AuthSession, AuthUser

router = APIRouter(prefix="/auth", tags=["auth"])

_STATUS_BY_KIND = {
    AuthErrorKind.INVALID_CREDENTIALS: 401,
    AuthErrorKind.ALREADY_EXISTS: 409,
    AuthErrorKind.UNAVAILABLE: 503,
}


def get_auth_provider(request: Request) -> AuthProvider:
    return request.app.state.auth_provider


def _raise_for(result: AuthFailure) -> NoReturn:
    raise HTTPException(status_code=_STATUS_BY_KIND[result.kind], detail=result.error.message)


# ── Response / request models ────────────────────────────

class SignInRequest(BaseModel):
    email: str
    password: str


class SignUpRequest(BaseModel):
    email: str
    password: str
    name: str | None = None


class SignInResponse(BaseModel):
    user: AuthUser
    session: AuthSession


class SignUpResponse(BaseModel):
    user: AuthUser
    session: AuthSession | None = None


class SessionResponse(BaseModel):
    session: AuthSession | None


# ── Endpoints ────────────────────────────────────────────

@router.post("/sign-in", response_model=SignInResponse)
async def sign_in(body: SignInRequest, auth: AuthProvider = Depends(get_auth_provider)):
    result = await auth.sign_in_with_password(body.email, body.password)
    if isinstance(result, AuthFailure):
        _raise_for(result)
    return SignInResponse(user=result.user, session=result.session)


@router.post("/sign-up", response_model=SignUpResponse, status_code=201)
async def sign_up(body: SignUpRequest, auth: AuthProvider = Depends(get_auth_provider)):
    result = await auth.sign_up(body.email, body.password, body.name)
    if isinstance(result, AuthFailure):
        _raise_for(result)
    return SignUpResponse(user=result.user, session=result.session)


@router.post("/sign-out")
async def sign_out(auth: AuthProvider = Depends(get_auth_provider)) -> dict:
    await auth.sign_out()
    return {"success": True}


@router.get("/session", response_model=SessionResponse)
async def get_session(auth: AuthProvider = Depends(get_auth_provider)):
    result = await auth.get_session()
    return SessionResponse(session=result.session)
