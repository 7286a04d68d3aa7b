from __future__ import annotations

import logging
import smtplib
import ssl
from email.mime.text import MIMEText

from studio_booking.application.ports.notifier import NotifierPort


class SmtpNotifier(NotifierPort):
    def __init__(
        self,
        host: str,
        port: int = 465,
        username: str | None = None,
        password: str | None = None,
        from_address: str | None = None,
        use_ssl: bool = True,
        timeout: float = 30.0,
    ) -> None:
        if not host:
            raise ValueError("SMTP_HOST is required for the SMTP notifier")
        self._host = host
        self._port = port
        self._username = username
        self._password = password
        self._from_address = from_address or username or ""
        self._use_ssl = use_ssl
        self._timeout = timeout
        self._logger = logging.getLogger(__name__)

    def _connect(self) -> smtplib.SMTP:
        context = ssl.create_default_context()
        if self._use_ssl:
            return smtplib.SMTP_SSL(self._host, self._port, context=context, timeout=self._timeout)
        server = smtplib.SMTP(self._host, self._port, timeout=self._timeout)
        server.starttls(context=context)
        return server

    def notify(self, to: str, subject: str, body: str) -> None:
        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self._from_address
        msg["To"] = to

        with self._connect() as server:
            if self._username and self._password:
                server.login(self._username, self._password)
            server.sendmail(self._from_address, [to], msg.as_string())
        self._logger.info("SMTP email sent", extra={"to": to})
