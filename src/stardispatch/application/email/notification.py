"""Application email – EmailNotificationProcessor.

Reference event processor for the worker: turns a star event into a
notification email.
"""
from __future__ import annotations

import logging

from stardispatch.application.email.message import EmailMessage
from stardispatch.application.email.sender import EmailSender
from stardispatch.kernel.errors import ProcessingError
from stardispatch.kernel.messaging import JsonEventSerializer, MessageSerializer, StarAddedEvent

__all__ = ["EmailNotificationProcessor"]

logger = logging.getLogger(__name__)


class EmailNotificationProcessor:
    def __init__(
        self,
        sender: EmailSender,
        recipients: list[str],
        serializer: MessageSerializer[StarAddedEvent] | None = None,
    ) -> None:
        if not recipients:
            raise ValueError("at least one recipient is required")
        self._sender = sender
        self._recipients = list(recipients)
        self._serializer = serializer or JsonEventSerializer()

    def render(self, event: StarAddedEvent) -> EmailMessage:
        noun = "star" if event.star_count == 1 else "stars"
        return EmailMessage(
            to=self._recipients,
            subject=f"{event.title} just got a star",
            text_body=(
                f"{event.title} now has {event.star_count} {noun}.\n\n{event.description}\n"
            ),
            # lets a mail relay drop duplicates produced by redelivery
            headers={"X-Star-Event": event.dedup_key},
        )

    async def process(self, payload: bytes) -> None:
        event = self._serializer.deserialize(payload)
        try:
            msg_id = await self._sender.send(self.render(event))
        except Exception as exc:
            raise ProcessingError(
                f"Could not send star notification for game {event.id}",
                detail={"dedup_key": event.dedup_key},
                cause=exc,
            ) from exc
        logger.info("email.notification_sent game_id=%s stars=%s id=%s", event.id, event.star_count, msg_id)
