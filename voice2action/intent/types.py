"""Typed intent resolution results."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Intent(str, Enum):
    EMAIL = "email"
    CALENDAR = "calendar"
    GENERAL = "general"


class Category(str, Enum):
    HOME = "home"
    WORK = "work"
    SPORT = "sport"
    IMPORTANT = "important"
    CASUAL = "casual"


@dataclass(frozen=True, slots=True)
class IntentResult:
    """Structured outcome of resolving one utterance.

    Only the fields belonging to ``intent`` are populated; the rest keep
    their empty defaults. Use the ``email``/``calendar``/``general``
    constructors rather than filling fields by hand.
    """

    intent: Intent
    category: Category = Category.CASUAL
    # email
    recipient: str = ""
    subject: str = ""
    body: str = ""
    # calendar
    title: str = ""
    start_time: datetime | None = None
    end_time: datetime | None = None
    description: str = ""
    # general
    response: str = ""
    # text the result was derived from (transcript or typed input)
    source_text: str = ""

    @classmethod
    def email(cls, *, recipient: str, subject: str, body: str, source_text: str) -> IntentResult:
        return cls(
            intent=Intent.EMAIL,
            recipient=recipient,
            subject=subject,
            body=body,
            source_text=source_text,
        )

    @classmethod
    def calendar(
        cls,
        *,
        title: str,
        start_time: datetime | None,
        end_time: datetime | None,
        description: str,
        category: Category,
        source_text: str,
    ) -> IntentResult:
        return cls(
            intent=Intent.CALENDAR,
            category=category,
            title=title,
            start_time=start_time,
            end_time=end_time,
            description=description,
            source_text=source_text,
        )

    @classmethod
    def general(cls, *, response: str, source_text: str) -> IntentResult:
        return cls(intent=Intent.GENERAL, response=response, source_text=source_text)

    @property
    def requires_confirmation(self) -> bool:
        return self.intent in (Intent.EMAIL, Intent.CALENDAR)

    @property
    def color_id(self) -> str:
        from voice2action.intent.categories import color_for

        return color_for(self.category)
