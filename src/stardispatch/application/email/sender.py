"""Application email – the port notifications are delivered through."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from stardispatch.application.email.message import EmailMessage

__all__ = ["EmailSender"]


@runtime_checkable
class EmailSender(Protocol):
    """Delivers the "new star" email built for one ``StarAddedEvent``.

    Implementations raise on failure.  :class:`EmailNotificationProcessor`
    turns that into a ``ProcessingError`` so the consumer releases the
    message for redelivery instead of finalizing it.
    """

    async def send(self, message: EmailMessage) -> str:
        """Return the provider's id for the sent mail (used in log lines)."""
        ...
