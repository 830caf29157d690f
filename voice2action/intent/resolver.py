"""Intent resolver: LLM extraction with a deterministic keyword fallback.

Two strategies are available:

* ``ExtractionStrategy``: asks the extraction backend for a labeled-line
  answer and interprets it. Handles both text and audio.
* ``KeywordStrategy``: regex keyword scan over text. Cannot handle audio.

``IntentResolver`` uses the extraction strategy when a backend is configured.
For text input a backend failure degrades to the keyword strategy; for audio
input there is nothing to degrade to, so errors surface to the caller.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from zoneinfo import ZoneInfo

from loguru import logger

from voice2action.errors import ConfigurationError
from voice2action.intent import fallback
from voice2action.intent.categories import detect_category, parse_category
from voice2action.intent.parser import LabeledFields, parse_labeled_response
from voice2action.intent.prompts import build_audio_prompt, build_text_prompt
from voice2action.intent.timewindow import normalize_window, parse_timestamp
from voice2action.intent.types import Category, Intent, IntentResult
from voice2action.providers.base import ExtractionProvider

AUDIO_SOURCE_PLACEHOLDER = "[Audio transcription]"

Clock = Callable[[], datetime]


def _parse_intent(value: str | None) -> Intent:
    try:
        return Intent(value) if value else Intent.GENERAL
    except ValueError:
        logger.debug(f"Unknown intent label {value!r}, treating as general")
        return Intent.GENERAL


class KeywordStrategy:
    name = "keyword"

    async def from_text(self, text: str) -> IntentResult:
        return fallback.classify(text)

    async def from_audio(self, audio: bytes, mime_type: str) -> IntentResult:
        raise ConfigurationError("Extraction backend not configured - cannot process audio directly")


class ExtractionStrategy:
    name = "extraction"

    def __init__(self, backend: ExtractionProvider, timezone: str, clock: Clock) -> None:
        self._backend = backend
        self._timezone = timezone
        self._tz = ZoneInfo(timezone)
        self._clock = clock

    async def from_text(self, text: str) -> IntentResult:
        now = self._clock()
        response = await self._backend.extract(build_text_prompt(text, now, self._timezone))
        logger.info(f"Extraction response: {response[:200]}")
        return self.interpret(parse_labeled_response(response), text, now)

    async def from_audio(self, audio: bytes, mime_type: str) -> IntentResult:
        now = self._clock()
        prompt = build_audio_prompt(now, self._timezone)
        logger.info(f"Sending {len(audio)} bytes of {mime_type} audio for extraction")
        response = await self._backend.extract_from_audio(prompt, audio, mime_type)
        logger.info(f"Extraction audio response: {response[:200]}")
        fields = parse_labeled_response(response)
        return self.interpret(fields, fields.description or AUDIO_SOURCE_PLACEHOLDER, now)

    def interpret(self, fields: LabeledFields, source_text: str, now: datetime) -> IntentResult:
        """Turn parsed labels into a typed result. Never raises."""
        intent = _parse_intent(fields.intent)

        if intent is Intent.EMAIL:
            return IntentResult.email(
                recipient=fields.recipient or "",
                subject=fields.subject or "",
                body=fields.body or source_text,
                source_text=source_text,
            )

        if intent is Intent.CALENDAR:
            title = fields.title or ""
            description = fields.description or source_text
            category = parse_category(fields.category)
            if category is None or category is Category.CASUAL:
                category = detect_category(f"{title} {description} {source_text}")
            start, end = normalize_window(
                parse_timestamp(fields.start_time, self._tz),
                parse_timestamp(fields.end_time, self._tz),
                now,
            )
            return IntentResult.calendar(
                title=title,
                start_time=start,
                end_time=end,
                description=description,
                category=category,
                source_text=source_text,
            )

        return IntentResult.general(
            response=fields.response or fields.raw.strip(),
            source_text=source_text,
        )


class IntentResolver:
    def __init__(
        self,
        backend: ExtractionProvider | None = None,
        timezone: str = "Europe/Berlin",
        clock: Clock | None = None,
    ) -> None:
        tz = ZoneInfo(timezone)
        self._clock: Clock = clock or (lambda: datetime.now(tz))
        self._keyword = KeywordStrategy()
        self._extraction: ExtractionStrategy | None = None
        if backend is not None and backend.available:
            self._extraction = ExtractionStrategy(backend, timezone, self._clock)
        else:
            logger.warning("Extraction backend not configured - using keyword fallback mode")

    @property
    def mode(self) -> str:
        return (self._extraction or self._keyword).name

    async def resolve_from_text(self, text: str) -> IntentResult:
        if self._extraction is None:
            return await self._keyword.from_text(text)
        try:
            return await self._extraction.from_text(text)
        except Exception as e:
            logger.warning(f"Extraction failed ({e}); using keyword fallback")
            return await self._keyword.from_text(text)

    async def resolve_from_audio(self, audio: bytes, mime_type: str = "audio/ogg") -> IntentResult:
        strategy = self._extraction or self._keyword
        return await strategy.from_audio(audio, mime_type)
