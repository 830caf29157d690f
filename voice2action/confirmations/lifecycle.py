"""Confirmation lifecycle: drive a pending action from a button press.

A proposal is shown with three buttons whose callback data is
``confirm_<id>``, ``cancel_<id>`` and ``edit_<id>``. Pressing one moves the
pending action into a terminal state (confirmed, cancelled, edit requested)
and the action is removed from the store as soon as the press is read, so a
repeated or concurrent press on the same id lands in the "stale request"
branch.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from loguru import logger

from voice2action.confirmations.models import ActionKind, CalendarPayload, EmailPayload, PendingAction
from voice2action.confirmations.store import ConfirmationStore
from voice2action.errors import InvalidCallbackError

STALE_MESSAGE = "⚠️ This request is no longer valid. Please try again."
EXPIRED_MESSAGE = "⌛ This request has expired. Please send the command again."
INVALID_MESSAGE = "⚠️ Invalid request."
CANCELLED_MESSAGE = "❌ Cancelled"
PROCESSING_ERROR_MESSAGE = "❌ Processing error"


class CallbackVerb(str, Enum):
    CONFIRM = "confirm"
    CANCEL = "cancel"
    EDIT = "edit"


class LifecycleOutcome(str, Enum):
    CONFIRMED = "confirmed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    EDIT_REQUESTED = "edit_requested"
    STALE = "stale"
    EXPIRED = "expired"
    INVALID = "invalid"


@dataclass(frozen=True, slots=True)
class TransitionResult:
    outcome: LifecycleOutcome
    action_id: str
    message: str


class CallbackReplier(Protocol):
    """What the lifecycle needs from the transport for one button press."""

    async def answer(self) -> None: ...

    async def clear_buttons(self) -> None: ...

    async def edit(self, text: str) -> None: ...

    async def send(self, text: str) -> None: ...


class EmailSender(Protocol):
    async def send(self, payload: EmailPayload) -> str: ...


class EventCreator(Protocol):
    async def create_event(self, payload: CalendarPayload) -> str: ...


def callback_data(verb: CallbackVerb, action_id: str) -> str:
    return f"{verb.value}_{action_id}"


def parse_callback_data(data: str | None) -> tuple[CallbackVerb, str]:
    """Split ``<verb>_<id>`` at the first separator only.

    Raises:
        InvalidCallbackError: On empty data, a missing separator or id,
            or an unknown verb.
    """
    if not data:
        raise InvalidCallbackError("Callback data is empty")
    verb, sep, action_id = data.partition("_")
    if not sep or not action_id:
        raise InvalidCallbackError(f"Invalid callback data format: {data}")
    try:
        return CallbackVerb(verb), action_id
    except ValueError as e:
        raise InvalidCallbackError(f"Unknown action: {verb}") from e


class ConfirmationLifecycle:
    def __init__(
        self,
        store: ConfirmationStore,
        email: EmailSender,
        calendar: EventCreator,
    ) -> None:
        self._store = store
        self._email = email
        self._calendar = calendar

    async def handle(self, data: str | None, replier: CallbackReplier) -> TransitionResult:
        """Acknowledge the press, then run the matching transition."""
        logger.info(f"Callback query received: {data}")

        # Acknowledge first so the client stops its spinner, whatever follows.
        try:
            await replier.answer()
        except Exception as e:
            logger.error(f"Failed to answer callback query: {e}")

        try:
            return await self._transition(data, replier)
        except Exception as e:
            logger.error(f"Callback query error: {e}")
            try:
                await replier.send(PROCESSING_ERROR_MESSAGE)
            except Exception as send_error:
                logger.error(f"Failed to send error message: {send_error}")
            return TransitionResult(LifecycleOutcome.FAILED, "", PROCESSING_ERROR_MESSAGE)

    async def _transition(self, data: str | None, replier: CallbackReplier) -> TransitionResult:
        try:
            verb, action_id = parse_callback_data(data)
        except InvalidCallbackError as e:
            logger.warning(str(e))
            await replier.send(INVALID_MESSAGE)
            return TransitionResult(LifecycleOutcome.INVALID, "", INVALID_MESSAGE)

        # Claimed before the first await: a concurrent press on the same id finds nothing.
        action = self._store.pop(action_id)
        logger.info(f"Action: {verb.value}, id: {action_id}, found: {'yes' if action else 'no'}")
        if action is None:
            await replier.send(STALE_MESSAGE)
            return TransitionResult(LifecycleOutcome.STALE, action_id, STALE_MESSAGE)

        if self._store.is_expired(action):
            await replier.edit(EXPIRED_MESSAGE)
            return TransitionResult(LifecycleOutcome.EXPIRED, action_id, EXPIRED_MESSAGE)

        if verb is CallbackVerb.CONFIRM:
            return await self._confirm(action, replier)

        if verb is CallbackVerb.CANCEL:
            await replier.edit(CANCELLED_MESSAGE)
            return TransitionResult(LifecycleOutcome.CANCELLED, action_id, CANCELLED_MESSAGE)

        message = (
            "✏️ To change it, send a new command with the corrections.\n\n"
            f'Original command:\n"{action.original_text}"'
        )
        await replier.edit(message)
        return TransitionResult(LifecycleOutcome.EDIT_REQUESTED, action_id, message)

    async def _confirm(self, action: PendingAction, replier: CallbackReplier) -> TransitionResult:
        await replier.clear_buttons()

        try:
            if action.kind is ActionKind.EMAIL:
                await replier.edit("📧 Sending email...")
                result = await self._email.send(action.payload)
                message = f"✅ Email sent!\n\n{result}"
            else:
                await replier.edit("📅 Creating event...")
                result = await self._calendar.create_event(action.payload)
                message = f"✅ Event created!\n\n{result}"
        except Exception as e:
            logger.error(f"Executing {action.kind.value} action {action.id} failed: {e}")
            verb = "sending" if action.kind is ActionKind.EMAIL else "creating event"
            message = f"❌ Error {verb}: {e}"
            await replier.edit(message)
            return TransitionResult(LifecycleOutcome.FAILED, action.id, message)

        logger.info(f"{action.kind.value} action {action.id} executed")
        await replier.edit(message)
        return TransitionResult(LifecycleOutcome.CONFIRMED, action.id, message)
