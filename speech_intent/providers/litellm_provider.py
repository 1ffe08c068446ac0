"""LiteLLM provider implementation for non-Gemini-SDK deployments.

LiteLLM reduces a Gemini prompt block to ``finish_reason="content_filter"``
without the block reason; that finish reason is what gets reported.
"""

import re
from typing import Any

import litellm
from litellm import acompletion
from loguru import logger

from speech_intent.providers.base import LLMProvider, ModelReply


# Block harassment, hate speech, sexual and dangerous content rated
# medium or above.
SAFETY_SETTINGS: list[dict[str, str]] = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
]

# Gemini block reasons / harm categories as they appear in error text.
_BLOCK_REASON_RE = re.compile(
    r"HARM_CATEGORY_[A-Z_]+|PROHIBITED_CONTENT|BLOCKLIST|SPII|SAFETY|RECITATION"
)


class LiteLLMProvider(LLMProvider):
    """
    LLM provider using LiteLLM.

    Every call carries ``SAFETY_SETTINGS``.  A refused prompt comes back as
    a ``ModelReply`` with ``block_reason`` set; any other failure raises.
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_base: str | None = None,
        default_model: str = "gemini/gemini-1.5-flash",
        max_tokens: int = 1024,
        temperature: float = 0.2,
    ):
        super().__init__(api_key, api_base)
        self.default_model = default_model
        self.max_tokens = max_tokens
        self.temperature = temperature

        # Disable LiteLLM logging noise
        litellm.suppress_debug_info = True
        # Drop unsupported parameters for providers
        litellm.drop_params = True

    async def generate(self, prompt: str) -> ModelReply:
        """
        Send a single user message via LiteLLM.

        Args:
            prompt: Full instruction text.

        Returns:
            ModelReply with the model text, or the block reason.

        Raises:
            Exception: whatever LiteLLM raises for transport, quota or
                authentication errors.
        """
        kwargs: dict[str, Any] = {
            "model": self.default_model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "safety_settings": SAFETY_SETTINGS,
        }
        # per-call credentials, no global litellm state
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.api_base:
            kwargs["api_base"] = self.api_base

        try:
            response = await acompletion(**kwargs)
        except litellm.ContentPolicyViolationError as e:
            reason = self._block_reason(str(e), fallback="content_policy_violation")
            logger.warning(f"LLM request blocked ({self.default_model}): {reason}")
            return ModelReply(block_reason=reason, finish_reason="content_filter", model=self.default_model)

        return self._parse_response(response)

    def _parse_response(self, response: Any) -> ModelReply:
        """Parse LiteLLM response into our standard format."""
        choice = response.choices[0]
        finish_reason = choice.finish_reason or "stop"
        content = choice.message.content or ""
        model = getattr(response, "model", "") or self.default_model

        if finish_reason == "content_filter":
            return ModelReply(
                text=content,
                block_reason=finish_reason,
                finish_reason=finish_reason,
                model=model,
            )
        return ModelReply(text=content, finish_reason=finish_reason, model=model)

    @staticmethod
    def _block_reason(raw: str, fallback: str) -> str:
        """Gemini block reason named in *raw*, else *fallback*."""
        match = _BLOCK_REASON_RE.search(raw)
        return match.group(0) if match else fallback

    def get_default_model(self) -> str:
        """Get the default model."""
        return self.default_model
