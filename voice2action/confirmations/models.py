"""Pending, user-confirmable actions."""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from voice2action.intent.fallback import DEFAULT_EMAIL_SUBJECT
from voice2action.intent.timewindow import normalize_window
from voice2action.intent.types import Intent, IntentResult

DEFAULT_EVENT_TITLE = "Voice Event"

# Telegram rejects callback_data longer than 64 bytes; the longest verb is "confirm_".
CALLBACK_DATA_LIMIT = 64
_LONGEST_VERB_PREFIX = len("confirm_")


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class ActionKind(str, Enum):
    EMAIL = "email"
    CALENDAR = "calendar"


@dataclass(frozen=True, slots=True)
class EmailPayload:
    to: str
    subject: str
    body: str


@dataclass(frozen=True, slots=True)
class CalendarPayload:
    title: str
    start_time: datetime
    end_time: datetime
    description: str
    color_id: str


@dataclass(frozen=True, slots=True)
class PendingAction:
    id: str
    kind: ActionKind
    payload: EmailPayload | CalendarPayload
    original_text: str
    owner_id: str
    created_at: datetime = field(default_factory=_utcnow)


def new_action_id(kind: ActionKind, owner_id: str) -> str:
    """Opaque id ``<kind>_<epoch-ms>_<owner>_<nonce>`` that fits in callback data."""
    stamp = time.time_ns() // 1_000_000
    nonce = secrets.token_hex(4)
    room = CALLBACK_DATA_LIMIT - _LONGEST_VERB_PREFIX - len(f"{kind.value}_{stamp}__{nonce}")
    owner = owner_id[:max(room, 0)]
    return f"{kind.value}_{stamp}_{owner}_{nonce}"


def build_pending_action(result: IntentResult, owner_id: str, now: datetime) -> PendingAction:
    """Turn a confirmable intent into an immutable PendingAction.

    Missing fields get their defaults here and calendar times are corrected,
    so the stored payload can be dispatched as-is.
    """
    original = result.source_text
    if result.intent is Intent.EMAIL:
        kind = ActionKind.EMAIL
        payload: EmailPayload | CalendarPayload = EmailPayload(
            to=result.recipient,
            subject=result.subject or DEFAULT_EMAIL_SUBJECT,
            body=result.body or original,
        )
    elif result.intent is Intent.CALENDAR:
        kind = ActionKind.CALENDAR
        start, end = normalize_window(result.start_time, result.end_time, now)
        payload = CalendarPayload(
            title=result.title or DEFAULT_EVENT_TITLE,
            start_time=start,
            end_time=end,
            description=result.description or original,
            color_id=result.color_id,
        )
    else:
        raise ValueError(f"{result.intent.value} intents do not need confirmation")

    return PendingAction(
        id=new_action_id(kind, owner_id),
        kind=kind,
        payload=payload,
        original_text=original,
        owner_id=owner_id,
        created_at=now,
    )
