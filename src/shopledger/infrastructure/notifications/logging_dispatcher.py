"""Dispatcher that only logs; used when no email provider is configured."""

from __future__ import annotations

import logging

from shopledger.infrastructure.notifications.base import EmailDispatcher
from shopledger.infrastructure.notifications.messages import EmailMessage

logger = logging.getLogger(__name__)


class LoggingDispatcher(EmailDispatcher):

    def __init__(self, admin_email: str) -> None:
        super().__init__(admin_email)
        self.sent: list[EmailMessage] = []

    def deliver(self, message: EmailMessage) -> None:
        self.sent.append(message)
        logger.info("Email to %s: %s", message.to, message.subject)
        logger.debug("%s", message.text)
