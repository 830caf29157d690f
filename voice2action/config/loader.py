"""Configuration loading utilities."""

import json
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from loguru import logger

from voice2action.config.schema import Config

# Load .env into os.environ (won't overwrite existing env vars)
load_dotenv(override=False)


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".voice2action" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file, then apply env-var overrides.

    Priority (highest → lowest):
        1. VOICE2ACTION_* environment variables / .env
        2. ~/.voice2action/config.json
        3. Built-in defaults
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            config = Config.model_validate(convert_keys(data))
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Failed to load config from {path}: {e}; using defaults")
            config = Config()
    else:
        config = Config()

    _apply_env_overrides(config)
    return config


# ---------------------------------------------------------------------------
# Flat env-var overrides (no __ nesting)
# ---------------------------------------------------------------------------

_ENV_STR_MAP: dict[str, tuple[str, str]] = {
    "VOICE2ACTION_LLM_MODEL": ("llm", "model"),
    "VOICE2ACTION_LLM_API_KEY": ("llm", "api_key"),
    "VOICE2ACTION_LLM_API_BASE": ("llm", "api_base"),
    "VOICE2ACTION_STT_API_KEY": ("transcription", "api_key"),
    "VOICE2ACTION_STT_API_BASE": ("transcription", "api_base"),
    "VOICE2ACTION_STT_MODEL": ("transcription", "model"),
    "VOICE2ACTION_STT_LANGUAGE": ("transcription", "language"),
}

_ENV_INT_MAP: dict[str, tuple[str, str]] = {
    "VOICE2ACTION_MAX_CONCURRENT_REQUESTS": ("limits", "max_concurrent_requests"),
    "VOICE2ACTION_CONFIRMATION_TTL_SECONDS": ("confirmations", "ttl_seconds"),
    "VOICE2ACTION_MAX_AUDIO_SIZE_MB": ("audio", "max_size_mb"),
}


def _apply_env_overrides(config: Config) -> None:
    """Apply flat VOICE2ACTION_* env vars on top of the loaded config."""

    for env_key, (section, attr) in _ENV_STR_MAP.items():
        if val := os.environ.get(env_key):
            setattr(getattr(config, section), attr, val)

    for env_key, (section, attr) in _ENV_INT_MAP.items():
        if val := os.environ.get(env_key):
            try:
                number = int(val)
            except ValueError:
                logger.warning(f"Ignoring {env_key}={val!r}: not an integer")
                continue
            if attr == "max_concurrent_requests" and number < 1:
                logger.warning(f"Ignoring {env_key}={val!r}: must be >= 1")
                continue
            setattr(getattr(config, section), attr, max(number, 0))

    # --- Telegram ---
    if val := os.environ.get("VOICE2ACTION_TELEGRAM_TOKEN"):
        config.telegram.token = val
        config.telegram.enabled = True
    if val := os.environ.get("VOICE2ACTION_TELEGRAM_ALLOW_FROM"):
        config.telegram.allow_from = [v.strip() for v in val.split(",") if v.strip()]
    if val := os.environ.get("VOICE2ACTION_TELEGRAM_PROXY"):
        config.telegram.proxy = val

    # --- Audio ---
    if val := os.environ.get("VOICE2ACTION_AUDIO_METHOD"):
        if val in ("whisper", "llm"):
            config.audio.processing_method = val
        else:
            logger.warning(f"Ignoring VOICE2ACTION_AUDIO_METHOD={val!r}: expected whisper or llm")

    if val := os.environ.get("VOICE2ACTION_TIMEZONE"):
        config.timezone = val


def save_config(config: Config, config_path: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    # Convert to camelCase format
    data = config.model_dump(mode="json")
    data = convert_to_camel(data)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """Convert snake_case keys to camelCase."""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)


def snake_to_camel(name: str) -> str:
    """Convert snake_case to camelCase."""
    components = name.split("_")
    return components[0] + "".join(x.title() for x in components[1:])
