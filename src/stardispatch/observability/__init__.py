"""Observability – structured JSON logging."""

from stardispatch.observability.logging import JsonLoggerFactory, get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]
