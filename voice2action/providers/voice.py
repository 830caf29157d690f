"""Speech-to-text provider for OpenAI-compatible transcription endpoints.

Works with OpenAI Whisper, Groq and self-hosted whisper servers that expose
``/audio/transcriptions``.
"""

from __future__ import annotations

import httpx
from loguru import logger

from voice2action.errors import ConfigurationError, TranscriptionError

DEFAULT_STT_MODEL = "whisper-1"
DEFAULT_API_BASE = "https://api.openai.com/v1"

_EXTENSIONS: dict[str, str] = {
    "audio/ogg": ".ogg",
    "audio/mpeg": ".mp3",
    "audio/mp4": ".m4a",
    "audio/wav": ".wav",
}


class OpenAITranscriptionProvider:
    """Transcribe audio bytes via ``POST {api_base}/audio/transcriptions``."""

    def __init__(
        self,
        api_key: str = "",
        api_base: str = DEFAULT_API_BASE,
        model: str = DEFAULT_STT_MODEL,
        language: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.api_base = (api_base or DEFAULT_API_BASE).rstrip("/")
        self.model = model
        self.language = language
        self.timeout = timeout
        self._transport = transport

    @property
    def available(self) -> bool:
        """Check if an API key is configured."""
        return bool(self.api_key)

    async def transcribe(self, audio: bytes, mime_type: str = "audio/ogg") -> str:
        """Transcribe *audio* to text.

        Returns:
            The transcript; ``""`` when nothing was understood.

        Raises:
            ConfigurationError: If no API key is configured.
            TranscriptionError: If the request fails.
        """
        if not self.api_key:
            raise ConfigurationError("Speech-to-text API key not configured")

        filename = f"voice{_EXTENSIONS.get(mime_type, '.ogg')}"
        data: dict[str, str] = {"model": self.model}
        if self.language and self.language != "auto":
            data["language"] = self.language

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.api_base}/audio/transcriptions",
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    files={"file": (filename, audio, mime_type)},
                    data=data,
                )
                response.raise_for_status()
                text = response.json().get("text", "") or ""
        except httpx.HTTPError as e:
            logger.error(f"STT transcription error: {e}")
            raise TranscriptionError(f"Transcription failed: {e}") from e

        text = text.strip()
        logger.debug(f"STT: {len(audio)} bytes → {len(text)} chars")
        return text
