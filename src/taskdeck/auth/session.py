# src/taskdeck/auth/session.py

from __future__ import annotations

"""
Session manager.

State machine:
  restoring -> anonymous | authenticated
  anonymous -> (login/register/google/facebook) -> authenticating
            -> authenticated | anonymous + error
  authenticated -> logout -> anonymous

Auth operations are coroutines: the caller schedules them and observes the
outcome through session snapshots (listeners) and notices, not a return value
it has to block on. Only one auth operation runs at a time; a request that
arrives while one is in flight is ignored. logout() waits for the in-flight
operation to settle before tearing the session down.
"""

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import replace

from ..core.notifications import LoggingNotifier, Notice, NoticeKind
from ..core.ports import CredentialSource, KeyValueStore, Notifier
from ..storage.keys import SESSION_KEY, tasks_key
from .auth_models import Session, User
from .providers import FACEBOOK_DEMO, GOOGLE_DEMO, AuthError, EmailLogin, EmailRegistration

logger = logging.getLogger(__name__)

SessionListener = Callable[[Session], None]

LOGIN_FAILED = "Login failed"
REGISTER_FAILED = "Registration failed"
GOOGLE_FAILED = "Google sign-in failed"
FACEBOOK_FAILED = "Facebook sign-in failed"


class SessionManager:
    def __init__(
        self,
        storage: KeyValueStore,
        *,
        notifier: Notifier | None = None,
        auth_delay_seconds: float = 1.0,
        social_auth_delay_seconds: float = 1.5,
    ) -> None:
        self._storage = storage
        self._notifier: Notifier = notifier or LoggingNotifier()
        self._auth_delay = max(0.0, float(auth_delay_seconds))
        self._social_delay = max(0.0, float(social_auth_delay_seconds))

        self._session = Session()
        self._listeners: list[SessionListener] = []
        self._lock = asyncio.Lock()

    # ---- observation ----

    @property
    def session(self) -> Session:
        return self._session

    @property
    def user(self) -> User | None:
        return self._session.user

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def _transition(self, session: Session) -> None:
        self._session = session
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception:
                logger.exception("Session listener failed.")

    def _notify(self, kind: NoticeKind, title: str, description: str) -> None:
        try:
            self._notifier.notify(Notice(kind=kind, title=title, description=description))
        except Exception:
            logger.exception("Notifier failed kind=%s", kind.value)

    # ---- persistence ----

    def _persist_user(self, user: User) -> None:
        self._storage.set(SESSION_KEY, json.dumps(user.to_dict(), ensure_ascii=False))

    def _forget_user(self) -> None:
        try:
            self._storage.delete(SESSION_KEY)
        except Exception:
            logger.exception("Failed to delete persisted session record.")

    def restore(self) -> Session:
        """Pick up the persisted user (if any). Always ends with is_loading=False."""
        raw = None
        try:
            raw = self._storage.get(SESSION_KEY)
        except Exception:
            logger.exception("Failed to read persisted session.")

        if raw is None:
            logger.info("No persisted session.")
            self._transition(Session(user=None, is_loading=False, error=None))
            return self._session

        try:
            user = User.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError):
            logger.warning("Persisted session is malformed; discarding it.", exc_info=True)
            self._forget_user()
            self._transition(Session(user=None, is_loading=False, error=None))
            return self._session

        logger.info("Restored session user_id=%s provider=%s", user.id, user.provider.value)
        self._transition(Session(user=user, is_loading=False, error=None))
        return self._session

    # ---- auth operations ----

    async def sign_in(
        self,
        source: CredentialSource,
        *,
        delay: float | None = None,
        success_kind: NoticeKind = NoticeKind.LOGIN_SUCCESS,
        success_title: str = "Signed in",
        failure_message: str = LOGIN_FAILED,
    ) -> Session:
        """
        Run one authentication attempt against `source`.

        On success the new user is persisted and becomes the session user.
        On failure the session ends up anonymous with `error` set, and a user
        who was signed in before the attempt is dropped from storage as well.
        """
        if self._session.is_loading or self._lock.locked():
            logger.info("Auth request ignored: another operation is in progress.")
            return self._session

        async with self._lock:
            previous = self._session.user
            self._transition(replace(self._session, is_loading=True, error=None))

            wait_s = self._auth_delay if delay is None else max(0.0, float(delay))
            try:
                if wait_s > 0:
                    await asyncio.sleep(wait_s)
                user = source.build_user()
                self._persist_user(user)
            except AuthError as e:
                logger.info("%s provider=%s: %s", failure_message, source.provider.value, e)
                return self._fail(previous, failure_message, str(e))
            except Exception:
                logger.exception("%s provider=%s", failure_message, source.provider.value)
                return self._fail(previous, failure_message, "Please try again.")

            logger.info("Signed in user_id=%s provider=%s", user.id, user.provider.value)
            self._transition(Session(user=user, is_loading=False, error=None))
            self._notify(success_kind, success_title, f"Welcome, {user.name}")
            return self._session

    def _fail(self, previous: User | None, message: str, detail: str) -> Session:
        # Memory goes anonymous, so storage must not bring `previous` back on restore.
        if previous is not None:
            self._forget_user()
        self._transition(Session(user=None, is_loading=False, error=message))
        self._notify(NoticeKind.LOGIN_FAILURE, message, detail)
        return self._session

    async def login(self, email: str, password: str) -> Session:
        return await self.sign_in(EmailLogin(email=email, password=password))

    async def register(self, name: str, email: str, password: str) -> Session:
        return await self.sign_in(
            EmailRegistration(name=name, email=email, password=password),
            success_kind=NoticeKind.REGISTER_SUCCESS,
            success_title="Account created",
            failure_message=REGISTER_FAILED,
        )

    async def login_with_google(self) -> Session:
        return await self.sign_in(
            GOOGLE_DEMO,
            delay=self._social_delay,
            success_title="Signed in with Google",
            failure_message=GOOGLE_FAILED,
        )

    async def login_with_facebook(self) -> Session:
        return await self.sign_in(
            FACEBOOK_DEMO,
            delay=self._social_delay,
            success_title="Signed in with Facebook",
            failure_message=FACEBOOK_FAILED,
        )

    async def logout(self) -> Session:
        """
        Full teardown: drop the persisted user and that user's tasks.

        Queued behind any in-flight auth operation.
        """
        async with self._lock:
            user = self._session.user
            try:
                self._storage.delete(SESSION_KEY)
                if user is not None:
                    self._storage.delete(tasks_key(user.id))
            except Exception:
                logger.exception("Failed to clear persisted session data.")

            logger.info("Signed out user_id=%s", user.id if user else None)
            self._transition(Session(user=None, is_loading=False, error=None))
            self._notify(NoticeKind.LOGOUT, "Signed out", "See you soon")
            return self._session
