"""Tagged result values returned by auth operations.

Expected failures (bad password, duplicate sign-up, provider down) are
returned as :class:`AuthFailure` rather than raised.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from clicktales.auth.schemas import AuthSession, AuthUser


class AuthErrorKind(str, enum.Enum):
    ALREADY_EXISTS = "already_exists"
    INVALID_CREDENTIALS = "invalid_credentials"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class AuthError:
    kind: AuthErrorKind
    message: str


@dataclass(frozen=True)
class AuthFailure:
    error: AuthError

    @property
    def kind(self) -> AuthErrorKind:
        return self.error.kind


@dataclass(frozen=True)
class SignInSuccess:
    user: AuthUser
    session: AuthSession


@dataclass(frozen=True)
class SignUpSuccess:
    """A freshly registered user.  ``session`` is ``None`` until sign-in."""

    user: AuthUser
    session: AuthSession | None = None


@dataclass(frozen=True)
class SessionResult:
    session: AuthSession | None


SignInResult = SignInSuccess | AuthFailure
SignUpResult = SignUpSuccess | AuthFailure


def failure(kind: AuthErrorKind, message: str) -> AuthFailure:
    """Shorthand for building an :class:`AuthFailure`."""
    return AuthFailure(AuthError(kind=kind, message=message))
