"""Notification adapters - Implementations of the NotifierPort."""

from .log_notifier import LoggingNotifier, Notification

__all__ = ["LoggingNotifier", "Notification"]
