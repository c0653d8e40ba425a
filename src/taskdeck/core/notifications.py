# src/taskdeck/core/notifications.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class NoticeKind(StrEnum):
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILURE = "login_failure"
    REGISTER_SUCCESS = "register_success"
    LOGOUT = "logout"


@dataclass(frozen=True, slots=True)
class Notice:
    kind: NoticeKind
    title: str
    description: str

    def __str__(self) -> str:
        if not self.description:
            return self.title
        return f"{self.title}: {self.description}"


class LoggingNotifier:
    """Default notifier: notices end up in the log (console handler shows INFO+)."""

    def notify(self, notice: Notice) -> None:
        if notice.kind == NoticeKind.LOGIN_FAILURE:
            logger.warning("%s", notice)
        else:
            logger.info("%s", notice)
