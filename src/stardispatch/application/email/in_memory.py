"""Application email – InMemoryEmailSender and LoggingEmailSender."""
from __future__ import annotations

import logging
import uuid

from stardispatch.application.email.message import EmailMessage

__all__ = ["InMemoryEmailSender", "LoggingEmailSender"]

logger = logging.getLogger(__name__)


class InMemoryEmailSender:
    """Fake EmailSender that captures sent messages in memory."""

    def __init__(self, fail_times: int = 0) -> None:
        self.sent: list[EmailMessage] = []
        self._fail_times = fail_times

    async def send(self, message: EmailMessage) -> str:
        if self._fail_times > 0:
            self._fail_times -= 1
            raise RuntimeError("smtp unavailable")
        self.sent.append(message)
        return str(uuid.uuid4())

    @property
    def count(self) -> int:
        return len(self.sent)

    def last(self) -> EmailMessage | None:
        return self.sent[-1] if self.sent else None


class LoggingEmailSender:
    """Writes each message to the log instead of an SMTP relay."""

    async def send(self, message: EmailMessage) -> str:
        msg_id = str(uuid.uuid4())
        logger.info("email.sent id=%s to=%s subject=%r", msg_id, ",".join(message.to), message.subject)
        return msg_id
