"""Deterministic keyword classification used when no LLM is available."""

from __future__ import annotations

import re

from voice2action.intent.categories import detect_category
from voice2action.intent.types import IntentResult

DEFAULT_EMAIL_SUBJECT = "Voice Message"
FALLBACK_TITLE_LIMIT = 100

_EMAIL_TERMS = re.compile(r"email|send|письмо|отправ", re.IGNORECASE)
_CALENDAR_TERMS = re.compile(r"calendar|event|meeting|календарь|событие|встреч", re.IGNORECASE)
_EMAIL_ADDRESS = re.compile(r"[\w.-]+@[\w.-]+\.\w+")


def classify(text: str) -> IntentResult:
    """Classify *text* by keyword presence. Same input, same output."""
    lowered = text.lower()

    if _EMAIL_TERMS.search(lowered):
        address = _EMAIL_ADDRESS.search(text)
        return IntentResult.email(
            recipient=address.group(0) if address else "",
            subject=DEFAULT_EMAIL_SUBJECT,
            body=text,
            source_text=text,
        )

    if _CALENDAR_TERMS.search(lowered):
        return IntentResult.calendar(
            title=text[:FALLBACK_TITLE_LIMIT],
            start_time=None,
            end_time=None,
            description=text,
            category=detect_category(lowered),
            source_text=text,
        )

    return IntentResult.general(response=text, source_text=text)
