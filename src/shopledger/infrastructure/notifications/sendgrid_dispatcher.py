"""Dispatcher that sends email through the SendGrid v3 HTTP API."""

from __future__ import annotations

import logging

import requests

from shopledger.domain.exceptions import DependencyError
from shopledger.infrastructure.notifications.base import EmailDispatcher
from shopledger.infrastructure.notifications.messages import EmailMessage

logger = logging.getLogger(__name__)

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"


class SendGridDispatcher(EmailDispatcher):

    def __init__(
        self,
        api_key: str,
        from_email: str,
        from_name: str,
        admin_email: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(admin_email)
        self._from = {"email": from_email, "name": from_name}
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {api_key}"})

    def deliver(self, message: EmailMessage) -> None:
        payload = {
            "personalizations": [{"to": [{"email": message.to}]}],
            "from": self._from,
            "subject": message.subject,
            "content": [{"type": "text/plain", "value": message.text}],
        }
        try:
            response = self._session.post(SENDGRID_URL, json=payload, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Error sending email to %s: %s", message.to, exc)
            raise DependencyError(f"Email provider failed: {exc}") from exc
        logger.info("Email sent to %s", message.to)
