"""Observability – structured logging helpers."""
from stardispatch.observability.logging.factory import JsonLoggerFactory
from stardispatch.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "get_logger"]
