"""Base classes for backend providers."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ExtractionProvider(ABC):
    """
    Extraction backend: sends a fully built instruction and returns the raw
    labeled-line answer. Implementations raise on failure; they never
    return an error message disguised as content.
    """

    def __init__(self, api_key: str | None = None, api_base: str | None = None):
        self.api_key = api_key
        self.api_base = api_base

    @property
    def available(self) -> bool:
        """Whether the backend has the credentials it needs."""
        return bool(self.api_key)

    @abstractmethod
    async def extract(self, prompt: str) -> str:
        """Answer a text instruction."""

    @abstractmethod
    async def extract_from_audio(self, prompt: str, audio: bytes, mime_type: str) -> str:
        """Answer an instruction about attached audio."""
