"""Inbound request handling: admission → (transcription) → resolution → proposal.

The pipeline is transport agnostic. A channel hands it the user id, the
input and a ``ChatReplier`` able to send, edit and delete messages in the
conversation the request came from.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any, Literal, Protocol
from zoneinfo import ZoneInfo

from loguru import logger

from voice2action.confirmations.models import build_pending_action
from voice2action.confirmations.store import ConfirmationStore
from voice2action.errors import ConfigurationError
from voice2action.intent.resolver import IntentResolver
from voice2action.intent.types import IntentResult
from voice2action.previews import ButtonRows, build_preview
from voice2action.runtime.admission import AdmissionQueue

TRANSCRIPTION_EMPTY_MESSAGE = "❌ Could not transcribe audio"

AudioMethod = Literal["whisper", "llm"]


class ChatReplier(Protocol):
    """Outbound side of one conversation. Message handles are opaque."""

    async def send(self, text: str, buttons: ButtonRows | None = None) -> Any: ...

    async def edit(self, handle: Any, text: str) -> None: ...

    async def delete(self, handle: Any) -> None: ...


class Transcriber(Protocol):
    async def transcribe(self, audio: bytes, mime_type: str = "audio/ogg") -> str: ...


class AssistantPipeline:
    def __init__(
        self,
        admission: AdmissionQueue,
        resolver: IntentResolver,
        store: ConfirmationStore,
        transcriber: Transcriber | None = None,
        audio_method: AudioMethod = "whisper",
        mime_type: str = "audio/ogg",
        timezone: str = "Europe/Berlin",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.admission = admission
        self.resolver = resolver
        self.store = store
        self.audio_method = audio_method
        self._transcriber = transcriber
        self._mime_type = mime_type
        self._tz = ZoneInfo(timezone)
        self._clock = clock or (lambda: datetime.now(self._tz))

    async def handle_text(self, user_id: str, text: str, chat: ChatReplier) -> IntentResult | None:
        """Process one typed command. Returns None when nothing was resolved."""
        async with self.admission.slot():
            processing: Any = None
            try:
                processing = await chat.send("💭 Analyzing...")
                logger.info(f"Text message from {user_id}: {text[:100]}")

                result = await self.resolver.resolve_from_text(text)
                logger.info(f"Intent: {result.intent.value}")

                await self._present(user_id, result, chat, processing)
                return result
            except Exception as e:
                logger.exception(f"Error handling text: {e}")
                await self._report_error(e, chat, processing)
                return None

    async def handle_voice(
        self,
        user_id: str,
        audio: bytes,
        chat: ChatReplier,
        mime_type: str | None = None,
    ) -> IntentResult | None:
        """Process one voice message, by transcription or direct audio extraction.

        *mime_type* is the format reported by the transport; the configured
        default is used when it is unknown.
        """
        mime_type = mime_type or self._mime_type
        async with self.admission.slot():
            processing: Any = None
            try:
                processing = await chat.send("🎤 Processing voice message...")
                logger.info(f"Voice message from {user_id}: {len(audio)} bytes")

                if self.audio_method == "llm":
                    await chat.edit(processing, "🎵 Analyzing audio...")
                    result = await self.resolver.resolve_from_audio(audio, mime_type)
                    logger.info(f"Intent (from audio): {result.intent.value}")
                else:
                    if self._transcriber is None:
                        raise ConfigurationError("Speech-to-text backend not configured")
                    await chat.edit(processing, "🔊 Transcribing audio...")
                    text = await self._transcriber.transcribe(audio, mime_type)
                    logger.info(f"Transcribed: {text}")
                    if not text:
                        await chat.edit(processing, TRANSCRIPTION_EMPTY_MESSAGE)
                        return None

                    await chat.edit(processing, f'💭 Analyzing: "{text[:50]}..."')
                    result = await self.resolver.resolve_from_text(text)
                    logger.info(f"Intent: {result.intent.value}")

                await self._present(user_id, result, chat, processing)
                return result
            except Exception as e:
                logger.exception(f"Error handling voice: {e}")
                await self._report_error(e, chat, processing)
                return None

    async def _present(self, user_id: str, result: IntentResult, chat: ChatReplier, processing: Any) -> None:
        if not result.requires_confirmation:
            await chat.edit(processing, f"💬 {result.response}")
            return

        self.store.purge_expired()
        action = build_pending_action(result, user_id, self._clock())
        self.store.create(action.id, action)
        logger.info(f"Pending {action.kind.value} action created: {action.id}")

        preview = build_preview(action, result.category, self._tz)
        try:
            await chat.send(preview.text, preview.buttons)
        except Exception:
            # Without its buttons the action is unreachable.
            self.store.delete(action.id)
            raise

        try:
            await chat.delete(processing)
        except Exception as e:
            logger.warning(f"Could not delete processing message: {e}")

    async def _report_error(self, error: Exception, chat: ChatReplier, processing: Any) -> None:
        if processing is None:
            return
        try:
            await chat.edit(processing, f"❌ Error: {error}")
        except Exception as e:
            logger.error(f"Failed to report error to user: {e}")
