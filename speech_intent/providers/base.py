"""Base LLM provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ModelReply:
    """Raw model output, or the reason the model refused to answer."""

    text: str = ""
    block_reason: str | None = None
    finish_reason: str = "stop"
    model: str = ""

    @property
    def blocked(self) -> bool:
        return self.block_reason is not None


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    ``generate`` may raise on transport, quota or authentication failures;
    content-safety refusals are reported through ``ModelReply.block_reason``.
    """

    def __init__(self, api_key: str | None = None, api_base: str | None = None):
        self.api_key = api_key
        self.api_base = api_base

    @abstractmethod
    async def generate(self, prompt: str) -> ModelReply:
        """Send a single-turn prompt and return the model's reply."""

    @abstractmethod
    def get_default_model(self) -> str:
        """Get the default model for this provider."""
