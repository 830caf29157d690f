import json
from pathlib import Path

import pytest

from voice2action.config.loader import camel_to_snake, load_config, save_config, snake_to_camel


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    import os

    for key in list(os.environ):
        if key.startswith("VOICE2ACTION_"):
            monkeypatch.delenv(key, raising=False)


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.json")

    assert config.limits.max_concurrent_requests == 1
    assert config.audio.processing_method == "whisper"
    assert config.timezone == "Europe/Berlin"
    assert config.confirmations.ttl_seconds == 86400
    assert not config.llm.configured


def test_camel_case_file_is_loaded(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "telegram": {"token": "abc", "allowFrom": ["42"]},
        "limits": {"maxConcurrentRequests": 3},
        "audio": {"processingMethod": "llm"},
    }))

    config = load_config(path)

    assert config.telegram.token == "abc"
    assert config.telegram.allow_from == ["42"]
    assert config.limits.max_concurrent_requests == 3
    assert config.audio.processing_method == "llm"


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json")

    config = load_config(path)

    assert config.limits.max_concurrent_requests == 1


def test_flat_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VOICE2ACTION_TELEGRAM_TOKEN", "tok")
    monkeypatch.setenv("VOICE2ACTION_TELEGRAM_ALLOW_FROM", "1, 2,,3")
    monkeypatch.setenv("VOICE2ACTION_LLM_API_KEY", "key")
    monkeypatch.setenv("VOICE2ACTION_MAX_CONCURRENT_REQUESTS", "2")
    monkeypatch.setenv("VOICE2ACTION_CONFIRMATION_TTL_SECONDS", "nope")
    monkeypatch.setenv("VOICE2ACTION_AUDIO_METHOD", "llm")

    config = load_config(tmp_path / "absent.json")

    assert config.telegram.enabled
    assert config.telegram.token == "tok"
    assert config.telegram.allow_from == ["1", "2", "3"]
    assert config.llm.configured
    assert config.limits.max_concurrent_requests == 2
    assert config.confirmations.ttl_seconds == 86400
    assert config.audio.processing_method == "llm"


def test_zero_concurrency_env_is_ignored(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VOICE2ACTION_MAX_CONCURRENT_REQUESTS", "0")

    config = load_config(tmp_path / "absent.json")

    assert config.limits.max_concurrent_requests == 1


def test_save_then_load(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    config = load_config(path)
    config.telegram.allow_from = ["7"]
    config.llm.model = "openai/gpt-4o-mini"

    save_config(config, path)
    raw = json.loads(path.read_text())
    reloaded = load_config(path)

    assert raw["telegram"]["allowFrom"] == ["7"]
    assert reloaded.llm.model == "openai/gpt-4o-mini"


def test_key_case_conversion() -> None:
    assert camel_to_snake("maxConcurrentRequests") == "max_concurrent_requests"
    assert snake_to_camel("max_concurrent_requests") == "maxConcurrentRequests"
