"""Application context: every stateful collaborator, built once from config."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from voice2action.config.schema import Config
from voice2action.confirmations.lifecycle import ConfirmationLifecycle
from voice2action.confirmations.store import ConfirmationStore
from voice2action.integrations.google import CalendarService, GmailService
from voice2action.intent.resolver import IntentResolver
from voice2action.pipeline import AssistantPipeline
from voice2action.providers.litellm_provider import LiteLLMProvider
from voice2action.providers.voice import OpenAITranscriptionProvider
from voice2action.runtime.admission import AdmissionQueue


@dataclass
class AppContext:
    config: Config
    admission: AdmissionQueue
    store: ConfirmationStore
    resolver: IntentResolver
    pipeline: AssistantPipeline
    lifecycle: ConfirmationLifecycle


def build_context(config: Config) -> AppContext:
    """Wire providers, queue, store, pipeline and lifecycle for one process."""
    backend = LiteLLMProvider(
        api_key=config.llm.api_key if config.llm.configured else None,
        api_base=config.llm.api_base,
        default_model=config.llm.model,
    )
    transcriber = OpenAITranscriptionProvider(
        api_key=config.transcription.api_key,
        api_base=config.transcription.api_base,
        model=config.transcription.model,
        language=config.transcription.language,
    )
    if not transcriber.available and config.audio.processing_method == "whisper":
        logger.warning("Speech-to-text API key not configured - voice messages will be rejected")

    admission = AdmissionQueue(config.limits.max_concurrent_requests)
    store = ConfirmationStore(ttl_seconds=config.confirmations.ttl_seconds)
    resolver = IntentResolver(backend, timezone=config.timezone)

    pipeline = AssistantPipeline(
        admission=admission,
        resolver=resolver,
        store=store,
        transcriber=transcriber if transcriber.available else None,
        audio_method=config.audio.processing_method,
        mime_type=config.audio.mime_type,
        timezone=config.timezone,
    )

    token_path = config.google_token_path
    lifecycle = ConfirmationLifecycle(
        store=store,
        email=GmailService(token_path),
        calendar=CalendarService(token_path, timezone=config.timezone, calendar_id=config.google.calendar_id),
    )

    logger.info(
        f"Context ready: resolver={resolver.mode}, audio={config.audio.processing_method}, "
        f"max_concurrent={admission.max_concurrent}"
    )
    return AppContext(
        config=config,
        admission=admission,
        store=store,
        resolver=resolver,
        pipeline=pipeline,
        lifecycle=lifecycle,
    )
