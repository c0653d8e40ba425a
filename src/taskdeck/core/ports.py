# src/taskdeck/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The session manager and task store depend on Protocols instead of concrete
implementations. This keeps the persistence substrate and the notification
surface swappable and makes testing easier.
"""

from typing import TYPE_CHECKING, Iterable, Protocol

if TYPE_CHECKING:
    from ..auth.auth_models import AuthProvider, User
    from .notifications import Notice


class KeyValueStore(Protocol):
    """
    Synchronous string-keyed storage.

    get() returns None for a missing key; delete() of a missing key is a no-op.
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...
    def keys(self) -> Iterable[str]: ...


class Notifier(Protocol):
    """Transient user-facing messages (toasts in a UI, printed lines in a console)."""
    def notify(self, notice: Notice) -> None: ...


class CredentialSource(Protocol):
    """
    Where a session comes from.

    build_user() either returns a fresh User or raises AuthError.
    """

    provider: AuthProvider

    def build_user(self) -> User: ...
