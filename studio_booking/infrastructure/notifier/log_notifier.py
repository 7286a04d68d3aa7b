from __future__ import annotations

import logging

from studio_booking.application.ports.notifier import NotifierPort


class LogNotifier(NotifierPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.sent: list[tuple[str, str, str]] = []

    def notify(self, to: str, subject: str, body: str) -> None:
        self.sent.append((to, subject, body))
        self._logger.info("Mock email", extra={"to": to, "reason": subject})
