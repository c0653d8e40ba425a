# src/taskdeck/auth/providers.py

"""
Credential sources.

Only the email variants look at their input (non-empty email/password/name).
Google and Facebook are fixed-response placeholders standing in for a real
OAuth handshake; they always produce the same demo identity.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field

from .auth_models import AuthProvider, User


class AuthError(Exception):
    """Authentication attempt rejected; the message is safe to show to the user."""


def new_user_id() -> str:
    return uuid.uuid4().hex


def name_from_email(email: str) -> str:
    """Display name derived from the local part of an address."""
    return email.split("@", 1)[0]


def _require(value: str, what: str) -> str:
    value = (value or "").strip()
    if not value:
        raise AuthError(f"{what} is required")
    return value


def _require_present(value: str, what: str) -> None:
    # Passwords are taken as typed: any non-empty string counts.
    if not value:
        raise AuthError(f"{what} is required")


@dataclass(slots=True)
class EmailLogin:
    email: str
    # Accepted but never checked: there is no credential store behind it.
    password: str = field(repr=False)
    provider: AuthProvider = AuthProvider.EMAIL

    def build_user(self) -> User:
        email = _require(self.email, "Email")
        _require_present(self.password, "Password")
        return User(
            id=new_user_id(),
            email=email,
            name=name_from_email(email),
            provider=self.provider,
            created_at=time.time(),
        )


@dataclass(slots=True)
class EmailRegistration:
    name: str
    email: str
    password: str = field(repr=False)
    provider: AuthProvider = AuthProvider.EMAIL

    def build_user(self) -> User:
        name = _require(self.name, "Name")
        email = _require(self.email, "Email")
        _require_present(self.password, "Password")
        return User(
            id=new_user_id(),
            email=email,
            name=name,
            provider=self.provider,
            created_at=time.time(),
        )


@dataclass(frozen=True, slots=True)
class DemoOAuthSource:
    """Placeholder for a real OAuth provider integration."""

    provider: AuthProvider
    email: str
    name: str
    avatar: str | None = None

    def build_user(self) -> User:
        return User(
            id=new_user_id(),
            email=self.email,
            name=self.name,
            provider=self.provider,
            created_at=time.time(),
            avatar=self.avatar,
        )


GOOGLE_DEMO = DemoOAuthSource(
    provider=AuthProvider.GOOGLE,
    email="user@gmail.com",
    name="Google User",
    avatar="https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?w=40&h=40&fit=crop&crop=face",
)

FACEBOOK_DEMO = DemoOAuthSource(
    provider=AuthProvider.FACEBOOK,
    email="user@facebook.com",
    name="Facebook User",
    avatar="https://images.unsplash.com/photo-1507003211169-0a1dd7228f2d?w=40&h=40&fit=crop&crop=face",
)
