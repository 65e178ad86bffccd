"""Notifier that writes to the log and keeps a history.

Stands in for the toast popups of the web console: success messages are
logged at INFO, errors at WARNING, and every notification is kept so a
caller (or a test) can read back what the user was shown.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Optional

from ...ports.notifier import NotificationKind


@dataclass(frozen=True, slots=True)
class Notification:
    kind: NotificationKind
    title: str
    message: str


_TITLES = {
    NotificationKind.SUCCESS: "Success",
    NotificationKind.ERROR: "Error",
}


@dataclass
class LoggingNotifier:
    """NotifierPort implementation backed by the logging module.

    Attributes:
        max_history: Number of notifications kept (oldest dropped first)
    """

    max_history: int = 50
    history: List[Notification] = field(default_factory=list)

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def notify(self, kind: NotificationKind, message: str) -> None:
        notification = Notification(kind=kind, title=_TITLES[kind], message=message)
        level = logging.INFO if kind is NotificationKind.SUCCESS else logging.WARNING
        self._logger.log(level, "%s: %s", notification.title, message)

        with self._lock:
            self.history.append(notification)
            if len(self.history) > self.max_history:
                del self.history[: len(self.history) - self.max_history]

    @property
    def last(self) -> Optional[Notification]:
        with self._lock:
            return self.history[-1] if self.history else None
