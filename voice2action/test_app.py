import asyncio

from voice2action.app import build_context
from voice2action.config.schema import Config
from voice2action.test_pipeline import FakeChat


def test_context_without_llm_key_uses_keyword_mode(tmp_path) -> None:
    config = Config(data_dir=tmp_path)
    config.limits.max_concurrent_requests = 3

    ctx = build_context(config)

    assert ctx.resolver.mode == "keyword"
    assert ctx.admission.status().max == 3
    assert ctx.pipeline.store is ctx.store
    assert ctx.pipeline.admission is ctx.admission


def test_context_with_llm_key_uses_extraction_mode(tmp_path) -> None:
    config = Config(data_dir=tmp_path)
    config.llm.api_key = "test-key"
    config.audio.processing_method = "llm"

    ctx = build_context(config)

    assert ctx.resolver.mode == "extraction"
    assert ctx.pipeline.audio_method == "llm"


def test_voice_without_transcription_key_reports_configuration_error(tmp_path) -> None:
    ctx = build_context(Config(data_dir=tmp_path))
    chat = FakeChat()

    result = asyncio.run(ctx.pipeline.handle_voice("42", b"OggS", chat))

    assert result is None
    assert chat.calls[-1][2] == "❌ Error: Speech-to-text backend not configured"
    assert len(ctx.store) == 0
