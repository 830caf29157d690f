"""Configuration schema (pydantic models, env-aware root)."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_data_dir() -> Path:
    return Path.home() / ".voice2action" / "data"


class TelegramConfig(BaseModel):
    """Telegram transport configuration."""

    enabled: bool = False
    token: str = ""
    allow_from: list[str] = Field(default_factory=list)  # empty = everyone
    proxy: str | None = None


class LLMConfig(BaseModel):
    """Extraction backend (any litellm-supported model)."""

    model: str = "gemini/gemini-1.5-flash"
    api_key: str = ""
    api_base: str | None = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


class TranscriptionConfig(BaseModel):
    """OpenAI-compatible speech-to-text endpoint."""

    api_key: str = ""
    api_base: str = "https://api.openai.com/v1"
    model: str = "whisper-1"
    language: str | None = None


class AudioConfig(BaseModel):
    # whisper: STT then text resolution; llm: audio goes straight to the LLM
    processing_method: Literal["whisper", "llm"] = "whisper"
    max_size_mb: int = 20
    mime_type: str = "audio/ogg"


class GoogleConfig(BaseModel):
    token_path: Path | None = None
    calendar_id: str = "primary"


class LimitsConfig(BaseModel):
    max_concurrent_requests: int = Field(default=1, ge=1)


class ConfirmationConfig(BaseModel):
    ttl_seconds: int = Field(default=86400, ge=0)  # 0 disables expiry


class Config(BaseSettings):
    """Root configuration for voice2action."""

    model_config = SettingsConfigDict(
        env_prefix="VOICE2ACTION_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    transcription: TranscriptionConfig = Field(default_factory=TranscriptionConfig)
    audio: AudioConfig = Field(default_factory=AudioConfig)
    google: GoogleConfig = Field(default_factory=GoogleConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    confirmations: ConfirmationConfig = Field(default_factory=ConfirmationConfig)

    timezone: str = "Europe/Berlin"
    data_dir: Path = Field(default_factory=_default_data_dir)
    logs_dir: Path | None = None

    @property
    def google_token_path(self) -> Path:
        return self.google.token_path or self.data_dir / "google_token.json"
