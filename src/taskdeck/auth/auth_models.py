# src/taskdeck/auth/auth_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class AuthProvider(StrEnum):
    """How a session was established."""

    EMAIL = "email"
    GOOGLE = "google"
    FACEBOOK = "facebook"


@dataclass(frozen=True, slots=True)
class User:
    id: str
    email: str
    name: str
    provider: AuthProvider
    created_at: float
    avatar: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "avatar": self.avatar,
            "provider": self.provider.value,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Any) -> User:
        """
        Rebuild a persisted user.

        Raises ValueError/KeyError/TypeError on a malformed record; callers
        treat any of them as corruption.
        """
        if not isinstance(data, dict):
            raise TypeError("user record must be an object")

        user_id = data["id"]
        email = data["email"]
        name = data["name"]
        if not isinstance(user_id, str) or not user_id:
            raise ValueError("user id must be a non-empty string")
        if not isinstance(email, str) or not isinstance(name, str):
            raise ValueError("user email/name must be strings")

        avatar = data.get("avatar")
        if avatar is not None and not isinstance(avatar, str):
            raise ValueError("user avatar must be a string")

        return cls(
            id=user_id,
            email=email,
            name=name,
            provider=AuthProvider(data.get("provider") or AuthProvider.EMAIL.value),
            created_at=float(data["created_at"]),
            avatar=avatar,
        )


@dataclass(frozen=True, slots=True)
class Session:
    """
    Snapshot of the authentication state.

    is_loading covers both the initial restore and any in-flight auth operation.
    error is set only by the operation that just failed.
    """

    user: User | None = None
    is_loading: bool = True
    error: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None
