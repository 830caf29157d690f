"""LiteLLM-backed extraction provider (Gemini, OpenAI, Anthropic, ...)."""

from __future__ import annotations

import base64
from typing import Any

import litellm
from litellm import acompletion
from loguru import logger

from voice2action.errors import ExtractionError
from voice2action.providers.base import ExtractionProvider

_AUDIO_FORMATS: dict[str, str] = {
    "audio/ogg": "ogg",
    "audio/mpeg": "mp3",
    "audio/mp4": "m4a",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/webm": "webm",
}


class LiteLLMProvider(ExtractionProvider):
    """
    Extraction provider using LiteLLM for multi-provider support.

    The model string follows litellm conventions, e.g.
    ``gemini/gemini-1.5-flash`` or ``openai/gpt-4o-mini``.
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

    async def extract(self, prompt: str) -> str:
        return await self._complete([{"role": "user", "content": prompt}])

    async def extract_from_audio(self, prompt: str, audio: bytes, mime_type: str) -> str:
        audio_format = _AUDIO_FORMATS.get(mime_type, mime_type.rsplit("/", 1)[-1])
        content: list[dict[str, Any]] = [
            {
                "type": "input_audio",
                "input_audio": {
                    "data": base64.b64encode(audio).decode("ascii"),
                    "format": audio_format,
                },
            },
            {"type": "text", "text": prompt},
        ]
        return await self._complete([{"role": "user", "content": content}])

    async def _complete(self, messages: list[dict[str, Any]]) -> str:
        kwargs: dict[str, Any] = {
            "model": self.default_model,
            "messages": messages,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }
        # Explicit credentials take precedence over provider env vars
        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.api_base:
            kwargs["api_base"] = self.api_base

        try:
            response = await acompletion(**kwargs)
        except Exception as e:
            logger.error(f"LLM call failed ({self.default_model}): {e}")
            raise ExtractionError(self._friendly_error(e)) from e

        content = response.choices[0].message.content
        if not content:
            raise ExtractionError(f"{self.default_model} returned an empty response")
        return content

    @staticmethod
    def _friendly_error(exc: Exception) -> str:
        """Map raw LLM exceptions to short user-facing messages."""
        raw = str(exc).lower()
        if "rate_limit" in raw or "429" in raw:
            return "The language model is rate limited, try again in a few seconds."
        if "timeout" in raw:
            return "The language model timed out."
        if "connection" in raw or "connect" in raw:
            return "Could not reach the language model."
        if "authentication" in raw or "401" in raw or "403" in raw:
            return "The language model rejected the API key."
        return "The language model is temporarily unavailable."
