"""LLM provider abstraction module."""

from speech_intent.providers.base import LLMProvider, ModelReply
from speech_intent.providers.factory import build_provider
from speech_intent.providers.gemini_provider import GeminiProvider
from speech_intent.providers.litellm_provider import LiteLLMProvider

__all__ = ["GeminiProvider", "LLMProvider", "LiteLLMProvider", "ModelReply", "build_provider"]
