"""Application email – ports, senders and the star notification processor."""
from stardispatch.application.email.message import EmailMessage
from stardispatch.application.email.sender import EmailSender
from stardispatch.application.email.in_memory import InMemoryEmailSender, LoggingEmailSender
from stardispatch.application.email.notification import EmailNotificationProcessor

__all__ = [
    "EmailMessage",
    "EmailNotificationProcessor",
    "EmailSender",
    "InMemoryEmailSender",
    "LoggingEmailSender",
]
