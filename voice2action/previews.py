"""Proposal previews shown to the user before an action is confirmed."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo

from voice2action.confirmations.lifecycle import CallbackVerb, callback_data
from voice2action.confirmations.models import ActionKind, CalendarPayload, EmailPayload, PendingAction
from voice2action.intent.types import Category

# (label, callback_data) per button; outer list = rows
ButtonRows = list[list[tuple[str, str]]]

CATEGORY_MARKERS: dict[Category, str] = {
    Category.HOME: "🏠",
    Category.WORK: "💼",
    Category.SPORT: "⚽",
    Category.IMPORTANT: "🔴",
    Category.CASUAL: "🔵",
}


@dataclass(frozen=True, slots=True)
class Preview:
    text: str
    buttons: ButtonRows


def confirmation_buttons(action: PendingAction) -> ButtonRows:
    confirm_label = "✅ Send" if action.kind is ActionKind.EMAIL else "✅ Create"
    return [
        [
            (confirm_label, callback_data(CallbackVerb.CONFIRM, action.id)),
            ("❌ Cancel", callback_data(CallbackVerb.CANCEL, action.id)),
        ],
        [("✏️ Edit", callback_data(CallbackVerb.EDIT, action.id))],
    ]


def _format_time(value: datetime, tz: tzinfo) -> str:
    return value.astimezone(tz).strftime("%d.%m.%Y %H:%M")


def email_preview(payload: EmailPayload) -> str:
    return (
        "📧 Email Preview\n\n"
        f"To: {payload.to or '(not specified)'}\n"
        f"Subject: {payload.subject}\n"
        f"Body:\n{payload.body}\n\n"
        "Send this email?"
    )


def calendar_preview(payload: CalendarPayload, category: Category, tz: tzinfo) -> str:
    marker = CATEGORY_MARKERS.get(category, CATEGORY_MARKERS[Category.CASUAL])
    return (
        "📅 Calendar Event Preview\n\n"
        f"{marker} Title: {payload.title}\n"
        f"Start: {_format_time(payload.start_time, tz)}\n"
        f"End: {_format_time(payload.end_time, tz)}\n"
        f"Category: {category.value}\n"
        f"Description: {payload.description}\n\n"
        "Create this event?"
    )


def build_preview(action: PendingAction, category: Category, tz: tzinfo) -> Preview:
    """Render *action* as preview text plus confirm/cancel/edit button rows."""
    if isinstance(action.payload, EmailPayload):
        text = email_preview(action.payload)
    else:
        text = calendar_preview(action.payload, category, tz)
    return Preview(text=text, buttons=confirmation_buttons(action))
