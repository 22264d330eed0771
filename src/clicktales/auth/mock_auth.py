"""Mock auth service — in-memory stand-in for the hosted auth provider.

Used when the hosted provider is unreachable so the app stays usable in
local development.  Two development shortcuts are built in and are both
controlled by ``allow_dev_shortcuts``:

* signing in with an unknown email auto-registers it;
* a few universal passwords are accepted for any account.

Neither is safe outside development; see :mod:`clicktales.auth.selector`.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, replace
from datetime import UTC, datetime

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
from clicktales.auth.schemas import AuthSession, AuthUser, CurrentUser
from clicktales.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

# ── Durable storage keys ─────────────────────────────────
USER_STORAGE_KEY = "mockAuthUser"
SESSION_STORAGE_KEY = "mockAuthSession"

# Simulated provider round-trip
SIGN_IN_DELAY_SECONDS = 0.5

UNIVERSAL_PASSWORDS = frozenset({"password123", "demo123", "admin123"})
DEFAULT_SIGN_UP_NAME = "New User"

MOCK_ACCESS_TOKEN = "mock-access-token"
MOCK_REFRESH_TOKEN = "mock-refresh-token"


@dataclass
class Credential:
    """A mock account.  The password is kept in plaintext."""

    id: str
    email: str
    password: str
    name: str | None = None

    def to_user(self) -> AuthUser:
        now = datetime.now(UTC).isoformat()
        return AuthUser(
            id=self.id,
            email=self.email,
            user_metadata={"name": self.name},
            created_at=now,
            updated_at=now,
        )


DEFAULT_ACCOUNTS: tuple[Credential, ...] = (
    Credential("mock-user-1", "test@example.com", "password123", "Test User"),
    Credential("mock-user-2", "demo@clicktales.com", "demo123", "Demo User"),
    Credential("mock-user-3", "monicams0108@gmail.com", "password123", "Monica"),
)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _new_user_id() -> str:
    return f"mock-user-{uuid.uuid4().hex[:12]}"


def _invalid_credentials():
    return failure(AuthErrorKind.INVALID_CREDENTIALS, "Invalid email or password")


class MockAuthService(AuthProvider):
    """Emulates sign-in, sign-up, sign-out and session lookup.

    The current user and session are written to *storage* on sign-in and
    removed on sign-out, so a restarted process picks them up again in
    :meth:`init`.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        *,
        allow_dev_shortcuts: bool = True,
        accounts: tuple[Credential, ...] = DEFAULT_ACCOUNTS,
    ) -> None:
        super().__init__()
        self._storage = storage
        self._allow_dev_shortcuts = allow_dev_shortcuts
        self._users: dict[str, Credential] = {
            _normalize_email(c.email): replace(c, email=_normalize_email(c.email))
            for c in accounts
        }
        self._current_user: CurrentUser | None = None

    @property
    def name(self) -> str:
        return "mock"

    @property
    def current_user(self) -> CurrentUser | None:
        return self._current_user

    def has_account(self, email: str) -> bool:
        return _normalize_email(email) in self._users

    async def init(self) -> None:
        """Restore the previously signed-in user and session, if persisted."""
        self._current_user, self._current_session = await self._load_snapshot()
        if self._current_user:
            logger.info("Mock auth restored session for %s", self._current_user.email)

    # ── Operations ───────────────────────────────────────

    async def sign_in_with_password(self, email: str, password: str) -> SignInResult:
        logger.info("Mock auth: sign-in attempt for %s", email)
        await asyncio.sleep(SIGN_IN_DELAY_SECONDS)

        user_email = _normalize_email(email)
        credential = self._users.get(user_email)

        if credential is None:
            if not self._allow_dev_shortcuts:
                logger.info("Mock auth: unknown account %s", user_email)
                return _invalid_credentials()
            credential = Credential(
                id=_new_user_id(),
                email=user_email,
                password=password.strip(),
                name=user_email.split("@")[0],
            )
            self._users[user_email] = credential
            logger.info("Mock auth: auto-registered %s", user_email)

        attempted = password.strip()
        if credential.password.strip() != attempted:
            if not (self._allow_dev_shortcuts and attempted in UNIVERSAL_PASSWORDS):
                logger.info("Mock auth: password mismatch for %s", user_email)
                return _invalid_credentials()
            logger.warning("Mock auth: universal password accepted for %s", user_email)

        user = credential.to_user()
        session = AuthSession(
            access_token=MOCK_ACCESS_TOKEN,
            refresh_token=MOCK_REFRESH_TOKEN,
            user=user,
        )
        self._current_user = CurrentUser(
            id=credential.id, email=credential.email, name=credential.name
        )
        self._current_session = session

        await self._storage.set(USER_STORAGE_KEY, self._current_user.model_dump_json())
        await self._storage.set(SESSION_STORAGE_KEY, session.model_dump_json())

        logger.info("Mock auth: sign-in successful for %s", user_email)
        return SignInSuccess(user=user, session=session)

    async def sign_up(
        self, email: str, password: str, name: str | None = None
    ) -> SignUpResult:
        logger.info("Mock auth: sign-up attempt for %s", email)
        await asyncio.sleep(SIGN_IN_DELAY_SECONDS)

        user_email = _normalize_email(email)
        if user_email in self._users:
            return failure(AuthErrorKind.ALREADY_EXISTS, "User already exists")

        credential = Credential(
            id=_new_user_id(),
            email=user_email,
            password=password,
            name=name or DEFAULT_SIGN_UP_NAME,
        )
        self._users[user_email] = credential

        logger.info("Mock auth: sign-up successful for %s", user_email)
        return SignUpSuccess(user=credential.to_user())

    async def sign_out(self) -> None:
        self._current_user = None
        self._current_session = None
        await self._storage.delete(USER_STORAGE_KEY)
        await self._storage.delete(SESSION_STORAGE_KEY)
        logger.info("Mock auth: signed out")

    async def get_session(self) -> SessionResult:
        user, session = await self._load_snapshot()
        if user is None or session is None:
            return SessionResult(session=None)
        self._current_user, self._current_session = user, session
        return SessionResult(session=session)

    # ── Private helpers ──────────────────────────────────

    async def _load_snapshot(self) -> tuple[CurrentUser | None, AuthSession | None]:
        raw_user = await self._storage.get(USER_STORAGE_KEY)
        raw_session = await self._storage.get(SESSION_STORAGE_KEY)
        try:
            user = CurrentUser.model_validate_json(raw_user) if raw_user else None
            session = AuthSession.model_validate_json(raw_session) if raw_session else None
        except ValidationError as exc:
            logger.warning("Mock auth: ignoring unreadable stored session: %s", exc)
            return None, None
        return user, session
