"""Gemini provider on the google-genai SDK.

Unlike the LiteLLM route, the SDK response keeps Gemini's
``prompt_feedback.block_reason`` and per-candidate ``finish_reason``, so a
refusal is reported with the reason Gemini gave.
"""

from __future__ import annotations

from typing import Any

from google import genai
from google.genai import types
from loguru import logger

from speech_intent.providers.base import LLMProvider, ModelReply

MODEL_NAME = "gemini-1.5-flash"

# Block harassment, hate speech, sexual and dangerous content rated
# medium or above.
SAFETY_SETTINGS: list[types.SafetySetting] = [
    types.SafetySetting(category=category, threshold=types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE)
    for category in (
        types.HarmCategory.HARM_CATEGORY_HARASSMENT,
        types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
        types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
        types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
    )
]

# Candidate finish reasons that mean the answer itself was withheld.
_BLOCKING_FINISH_REASONS = {"SAFETY", "PROHIBITED_CONTENT", "BLOCKLIST", "SPII", "RECITATION"}


def _name(value: Any) -> str:
    """Enum member or plain string -> upper-case name."""
    return str(getattr(value, "value", value)).upper()


class GeminiProvider(LLMProvider):
    """
    Client for the Gemini API with fixed safety settings.
    """

    def __init__(
        self,
        api_key: str | None = None,
        default_model: str = MODEL_NAME,
        max_tokens: int = 1024,
        temperature: float = 0.2,
    ):
        """
        Initialize the Gemini client.

        Args:
            api_key: Gemini API key.
            default_model: Model id; a LiteLLM-style ``gemini/`` prefix is dropped.

        Raises:
            ValueError: If no API key provided
        """
        super().__init__(api_key)
        if not self.api_key:
            raise ValueError("Gemini API key required.")
        self.default_model = default_model.removeprefix("gemini/")
        self.client = genai.Client(api_key=self.api_key)
        self._config = types.GenerateContentConfig(
            safety_settings=SAFETY_SETTINGS,
            max_output_tokens=max_tokens,
            temperature=temperature,
        )

    async def generate(self, prompt: str) -> ModelReply:
        """
        Send *prompt* to Gemini.

        Returns:
            ModelReply with the text, or with ``block_reason`` set when the
            prompt or the answer was blocked.

        Raises:
            google.genai.errors.APIError: transport, quota or auth failures.
        """
        response = await self.client.aio.models.generate_content(
            model=self.default_model,
            contents=prompt,
            config=self._config,
        )
        return self._parse_response(response)

    def _parse_response(self, response: Any) -> ModelReply:
        model = getattr(response, "model_version", None) or self.default_model

        feedback = getattr(response, "prompt_feedback", None)
        if feedback is not None and feedback.block_reason:
            reason = _name(feedback.block_reason)
            logger.warning(f"Gemini blocked the prompt: {reason}")
            return ModelReply(block_reason=reason, finish_reason="content_filter", model=model)

        candidates = getattr(response, "candidates", None) or []
        finish = _name(candidates[0].finish_reason) if candidates and candidates[0].finish_reason else "STOP"
        if finish in _BLOCKING_FINISH_REASONS:
            logger.warning(f"Gemini withheld the answer: {finish}")
            return ModelReply(block_reason=finish, finish_reason="content_filter", model=model)

        return ModelReply(text=response.text or "", finish_reason=finish.lower(), model=model)

    def get_default_model(self) -> str:
        """Get the default model."""
        return self.default_model
