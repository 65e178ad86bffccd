"""Notifier port - User-facing outcome messages."""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class NotifierPort(Protocol):
    """Port for reporting the outcome of an operation to the user.

    Implementation: adapters/notify/log_notifier.py
    """

    def notify(self, kind: NotificationKind, message: str) -> None:
        """Show a notification.

        Args:
            kind: Success or error.
            message: Text shown to the user.
        """
        ...
