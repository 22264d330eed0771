"""Hosted auth provider client — async HTTP wrapper over the provider's auth API.

Exposes the same surface as :class:`~clicktales.auth.mock_auth.MockAuthService`
so callers never need to know which backend is active.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from clicktales.auth.base import AuthProvider
from clicktales.auth.results import (
    AuthErrorKind,
    SessionResult,
    SignInResult,
    SignInSuccess,
    SignUpResult,
    SignUpSuccess,
    failure,
)
from clicktales.auth.schemas import AuthSession, AuthUser
from clicktales.config import settings

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 10.0


def _unavailable():
    return failure(AuthErrorKind.UNAVAILABLE, "Authentication service unavailable")


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text
    for field in ("msg", "error_description", "message", "error"):
        if isinstance(data, dict) and data.get(field):
            return str(data[field])
    return resp.text


class SupabaseAuthClient(AuthProvider):
    """Password-grant auth against the hosted provider's ``/auth/v1`` API."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__()
        self._base_url = (base_url or settings.supabase_url).rstrip("/")
        self._api_key = api_key if api_key is not None else settings.supabase_anon_key
        self._transport = transport

    @property
    def name(self) -> str:
        return "supabase"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self._base_url}/auth/v1",
            headers={"apikey": self._api_key},
            timeout=REQUEST_TIMEOUT_SECONDS,
            transport=self._transport,
        )

    # ── Operations ───────────────────────────────────────

    async def sign_in_with_password(self, email: str, password: str) -> SignInResult:
        try:
            async with self._client() as client:
                resp = await client.post(
                    "/token",
                    params={"grant_type": "password"},
                    json={"email": email.strip().lower(), "password": password},
                )
        except httpx.HTTPError as exc:
            logger.exception("Sign-in request error: %s", exc)
            return _unavailable()

        if resp.status_code in (400, 401, 422):
            logger.info("Sign-in rejected for %s: %s", email, _error_message(resp))
            return failure(AuthErrorKind.INVALID_CREDENTIALS, "Invalid email or password")
        if not resp.is_success:
            logger.error("Sign-in failed: %s %s", resp.status_code, resp.text)
            return _unavailable()

        try:
            session = AuthSession.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            logger.error("Unexpected sign-in payload: %s", exc)
            return _unavailable()

        self._current_session = session
        logger.info("Signed in %s", session.user.email)
        return SignInSuccess(user=session.user, session=session)

    async def sign_up(
        self, email: str, password: str, name: str | None = None
    ) -> SignUpResult:
        body = {
            "email": email.strip().lower(),
            "password": password,
            "data": {"name": name} if name else {},
        }
        try:
            async with self._client() as client:
                resp = await client.post("/signup", json=body)
        except httpx.HTTPError as exc:
            logger.exception("Sign-up request error: %s", exc)
            return _unavailable()

        if resp.status_code in (400, 422):
            message = _error_message(resp)
            if "already" in message.lower():
                return failure(AuthErrorKind.ALREADY_EXISTS, "User already exists")
            logger.info("Sign-up rejected for %s: %s", email, message)
            return failure(AuthErrorKind.INVALID_CREDENTIALS, message)
        if not resp.is_success:
            logger.error("Sign-up failed: %s %s", resp.status_code, resp.text)
            return _unavailable()

        try:
            data = resp.json()
            # With auto-confirm the provider wraps the user in a session
            user = AuthUser.model_validate(data.get("user", data))
            session = AuthSession.model_validate(data) if "access_token" in data else None
        except (ValueError, ValidationError) as exc:
            logger.error("Unexpected sign-up payload: %s", exc)
            return _unavailable()

        return SignUpSuccess(user=user, session=session)

    async def sign_out(self) -> None:
        session, self._current_session = self._current_session, None
        if session is None:
            return
        try:
            async with self._client() as client:
                resp = await client.post(
                    "/logout",
                    headers={"Authorization": f"Bearer {session.access_token}"},
                )
            if not resp.is_success:
                logger.warning("Remote sign-out returned %s", resp.status_code)
        except httpx.HTTPError as exc:
            logger.warning("Remote sign-out request error: %s", exc)

    async def get_session(self) -> SessionResult:
        return SessionResult(session=self._current_session)
