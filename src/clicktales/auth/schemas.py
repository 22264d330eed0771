"""Pydantic shapes for users and sessions, shared by every auth backend."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class AuthUser(BaseModel):
    """Public view of an authenticated user, as returned by the provider."""

    id: str
    email: str
    user_metadata: dict[str, Any] = Field(default_factory=dict)
    app_metadata: dict[str, Any] = Field(default_factory=dict)
    aud: str = "authenticated"
    role: str = "authenticated"
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def name(self) -> str | None:
        return self.user_metadata.get("name")


class AuthSession(BaseModel):
    """Token pair plus the user it was issued for."""

    access_token: str
    refresh_token: str
    expires_in: int = 3600
    token_type: str = "bearer"
    user: AuthUser


class CurrentUser(BaseModel):
    """Minimal snapshot of the signed-in user kept alongside the session."""

    id: str
    email: str
    name: str | None = None
