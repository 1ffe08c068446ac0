"""Domain exceptions for speech_intent."""

from __future__ import annotations


class SpeechIntentError(Exception):
    """Base class for all speech_intent errors."""


class ConfigurationError(SpeechIntentError):
    """Required process configuration is missing or invalid."""


class MissingEntitiesError(SpeechIntentError):
    """An add-intent arrived without the fields needed to build a record."""

    def __init__(self, intent: str, missing: list[str]) -> None:
        self.intent = intent
        self.missing = missing
        super().__init__(f"{intent} is missing required entities: {', '.join(missing)}")
