"""Application-layer errors – raised around event processing."""

from __future__ import annotations

from stardispatch.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class ProcessingError(ApplicationError):
    """An event processor could not handle a delivery."""

    default_code = "processing_failed"


__all__ = ["ApplicationError", "ProcessingError"]
