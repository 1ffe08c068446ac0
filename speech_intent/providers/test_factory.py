from unittest.mock import patch

import pytest

from speech_intent.errors import ConfigurationError
from speech_intent.providers.factory import build_provider
from speech_intent.providers.gemini_provider import GeminiProvider
from speech_intent.providers.litellm_provider import LiteLLMProvider


def test_gemini_is_the_default_provider(settings) -> None:
    with patch("speech_intent.providers.gemini_provider.genai"):
        provider = build_provider(settings)

    assert isinstance(provider, GeminiProvider)
    assert provider.get_default_model() == "gemini-1.5-flash"


def test_litellm_provider_is_selectable(settings) -> None:
    provider = build_provider(settings.model_copy(update={"llm_provider": "litellm", "model": "gemini/gemini-1.5-flash"}))

    assert isinstance(provider, LiteLLMProvider)
    assert provider.get_default_model() == "gemini/gemini-1.5-flash"


def test_unknown_provider_is_a_configuration_error(settings) -> None:
    with pytest.raises(ConfigurationError):
        build_provider(settings.model_copy(update={"llm_provider": "openai"}))
