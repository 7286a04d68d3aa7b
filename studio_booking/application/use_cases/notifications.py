from __future__ import annotations

import logging
from typing import Any, Callable

from studio_booking.application.ports.notifier import NotifierPort

Scheduler = Callable[..., Any]


def run_now(func: Callable[..., Any], *args: Any) -> None:
    func(*args)


class NotificationDispatcher:
    """Best-effort e-mail fan-out. Delivery errors are logged, never raised."""

    def __init__(self, notifier: NotifierPort, schedule: Scheduler | None = None) -> None:
        self._notifier = notifier
        self._schedule = schedule or run_now
        self._logger = logging.getLogger(__name__)

    def dispatch(self, to: str | None, subject: str, body: str) -> bool:
        if not to:
            self._logger.info("Notification skipped, no recipient", extra={"reason": subject})
            return False
        try:
            self._schedule(self._deliver, to, subject, body)
        except Exception as e:
            self._logger.exception("Could not schedule notification", extra={"to": to, "error": str(e)})
            return False
        return True

    def _deliver(self, to: str, subject: str, body: str) -> None:
        try:
            self._notifier.notify(to, subject, body)
            self._logger.info("Notification sent", extra={"to": to, "reason": subject})
        except Exception as e:
            self._logger.exception("Notification failed", extra={"to": to, "error": str(e)})
