"""Application email – EmailMessage value object."""
from __future__ import annotations

from dataclasses import dataclass, field

__all__ = ["EmailMessage"]


@dataclass
class EmailMessage:
    """A fully-resolved email message ready to be sent."""

    to: list[str]
    subject: str
    text_body: str
    html_body: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
