"""Base auth provider — abstract interface every auth backend implements."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

from clicktales.auth.results import SessionResult, SignInResult, SignUpResult
from clicktales.auth.schemas import AuthSession

logger = logging.getLogger(__name__)

INITIAL_SESSION = "INITIAL_SESSION"

# Delay before the initial auth-state notification fires
NOTIFY_DELAY_SECONDS = 0.1

AuthStateCallback = Callable[[str, AuthSession | None], None]


class Subscription:
    """Handle returned by :meth:`AuthProvider.on_auth_state_change`."""

    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    @property
    def active(self) -> bool:
        return not self._handle.cancelled()

    def unsubscribe(self) -> None:
        """Suppress the pending notification; safe to call more than once."""
        if self.active:
            self._handle.cancel()
            logger.debug("Unsubscribed from auth state changes")


class AuthProvider(ABC):
    """Abstract base class for authentication backends.

    Concrete providers keep the current session in ``_current_session``;
    the base class uses it to deliver the one-shot initial notification.
    """

    def __init__(self) -> None:
        self._current_session: AuthSession | None = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Short backend name (used in logs and health output)."""

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> SignInResult:
        """Authenticate with email and password."""

    @abstractmethod
    async def sign_up(
        self, email: str, password: str, name: str | None = None
    ) -> SignUpResult:
        """Register a new account.  Does not start a session."""

    @abstractmethod
    async def sign_out(self) -> None:
        """End the current session.  Never fails."""

    @abstractmethod
    async def get_session(self) -> SessionResult:
        """Return the current session, if any."""

    def on_auth_state_change(self, callback: AuthStateCallback) -> Subscription:
        """Schedule a single ``INITIAL_SESSION`` notification.

        The callback runs on the event loop after a short delay, never
        synchronously, and receives the session current at that moment.
        No further events are emitted.
        """
        loop = asyncio.get_running_loop()
        handle = loop.call_later(NOTIFY_DELAY_SECONDS, self._notify_initial, callback)
        return Subscription(handle)

    def _notify_initial(self, callback: AuthStateCallback) -> None:
        callback(INITIAL_SESSION, self._current_session)
