"""Build the configured LLM provider."""

from __future__ import annotations

from speech_intent.errors import ConfigurationError
from speech_intent.providers.base import LLMProvider
from speech_intent.providers.gemini_provider import GeminiProvider
from speech_intent.providers.litellm_provider import LiteLLMProvider
from speech_intent.settings import SpeechIntentSettings


def build_provider(settings: SpeechIntentSettings) -> LLMProvider:
    kind = settings.llm_provider.lower()
    if kind == "gemini":
        return GeminiProvider(
            api_key=settings.gemini_api_key,
            default_model=settings.model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
        )
    if kind == "litellm":
        return LiteLLMProvider(
            api_key=settings.gemini_api_key,
            default_model=settings.model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
        )
    raise ConfigurationError(f"Unknown llm_provider {settings.llm_provider!r} (expected gemini or litellm)")
