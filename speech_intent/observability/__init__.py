"""Logging helpers."""

from speech_intent.observability.logs import configure_logging

__all__ = ["configure_logging"]
