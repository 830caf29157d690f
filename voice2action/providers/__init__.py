"""Provider abstraction module (extraction LLM, speech-to-text)."""

from voice2action.providers.base import ExtractionProvider
from voice2action.providers.litellm_provider import LiteLLMProvider
from voice2action.providers.voice import OpenAITranscriptionProvider

__all__ = ["ExtractionProvider", "LiteLLMProvider", "OpenAITranscriptionProvider"]
