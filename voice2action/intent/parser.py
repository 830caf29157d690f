"""Parser for the extraction backend's labeled-line response format.

The backend answers with lines such as::

    INTENT: calendar
    CATEGORY: work
    TITLE: Обсуждение проекта
    START_TIME: 2025-10-04T15:00:00
    ...
    RESPONSE: Event created

Each label is searched independently, so missing labels, reordered labels
and chatter around the block are all tolerated. A label that is present
with nothing after it parses as ``""``; a label that does not occur at all
parses as ``None``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_WORD_LABELS = ("INTENT", "CATEGORY")
_LINE_LABELS = (
    "RECIPIENT",
    "SUBJECT",
    "BODY",
    "TITLE",
    "START_TIME",
    "END_TIME",
    "DESCRIPTION",
)

_PATTERNS: dict[str, re.Pattern[str]] = {
    **{label: re.compile(rf"\b{label}:[ \t]*(\w*)", re.IGNORECASE) for label in _WORD_LABELS},
    **{label: re.compile(rf"\b{label}:[ \t]*([^\r\n]*)", re.IGNORECASE) for label in _LINE_LABELS},
    # RESPONSE runs to the end of the block and may span lines.
    "RESPONSE": re.compile(r"\bRESPONSE:\s*(.*)", re.IGNORECASE | re.DOTALL),
}


@dataclass(frozen=True, slots=True)
class LabeledFields:
    """Raw label values; ``None`` means the label was absent."""

    raw: str
    intent: str | None = None
    category: str | None = None
    recipient: str | None = None
    subject: str | None = None
    body: str | None = None
    title: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    description: str | None = None
    response: str | None = None


def _scan(text: str, label: str) -> str | None:
    match = _PATTERNS[label].search(text)
    if match is None:
        return None
    return match.group(1).strip()


def parse_labeled_response(text: str) -> LabeledFields:
    """Scan *text* for every known label. Never raises."""
    text = text or ""
    values = {label.lower(): _scan(text, label) for label in _PATTERNS}
    intent = values.pop("intent")
    return LabeledFields(
        raw=text,
        intent=intent.lower() if intent is not None else None,
        **values,
    )
