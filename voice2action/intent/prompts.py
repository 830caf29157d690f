"""Instruction templates for the extraction backend."""

from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

_ROLE = "You are a professional voice assistant."

_TASK = """TASK: Identify the user's intent and extract the key details.

INTENT TYPES:
1. EMAIL - the user wants to send an email
2. CALENDAR - the user wants to create a calendar event, meeting or reminder
3. GENERAL - any other request or question

CATEGORY TYPES (choose the best match):
1. HOME - household, family, personal domestic matters
2. WORK - job, business, professional meetings or tasks
3. SPORT - workouts, training, physical activities
4. IMPORTANT - critical, urgent or high-priority matters
5. CASUAL - everyday activities like meals, leisure, miscellaneous

CALENDAR EVENT RULES (CRITICAL):
- TITLE is 2-4 words describing only the main action or topic.
- TITLE is in the nominative case (именительный падеж).
- Ignore filler words such as "пожалуйста", "можешь", "сейчас", "братан" in TITLE.
- Give precise START_TIME and END_TIME in ISO 8601.
- If only a duration is mentioned (e.g. "ещё 3 часа"), START_TIME is the current user local time and END_TIME is START_TIME + duration.
- If a start and a duration are given, compute END_TIME from the duration.
- If only START_TIME is known, END_TIME is START_TIME + 1 hour.
- If no time is given at all, START_TIME is the current user local time.
- DESCRIPTION contains {description_source}."""

_EXAMPLES = """EXAMPLES:
Input: "Создай встречу завтра в 15:00 обсудить проект с командой"
→ TITLE: Обсуждение проекта
→ START_TIME: 2025-10-04T15:00:00
→ DESCRIPTION: Создай встречу завтра в 15:00 обсудить проект с командой

Input: "Напомни позвонить маме через час"
→ TITLE: Звонок маме
→ START_TIME: 2025-10-03T04:36:00
→ DESCRIPTION: Напомни позвонить маме через час

Input: "Создай событие на период один час встреча с Сашей"
→ TITLE: Встреча с Сашей
→ START_TIME: 2025-10-03T04:36:00
→ DESCRIPTION: Создай событие на период один час встреча с Сашей"""

_FORMAT = """RESPONSE FORMAT (use EXACTLY this structure, one label per line):
INTENT: <email|calendar|general>
CATEGORY: <home|work|sport|important|casual>
RECIPIENT: <email address if email intent, otherwise leave empty>
SUBJECT: <subject if email intent, otherwise leave empty>
BODY: <body if email intent, otherwise leave empty>
TITLE: <2-4 words, nominative case, NO filler words>
START_TIME: <ISO 8601 datetime, include offset if relevant>
END_TIME: <ISO 8601 datetime, include offset if relevant>
DESCRIPTION: <{description_source}>
RESPONSE: <brief answer or confirmation message>"""


def _clock_block(now: datetime, timezone: str) -> str:
    utc_now = now.astimezone(UTC)
    local_now = now.astimezone(ZoneInfo(timezone))
    return (
        f"Current UTC time: {utc_now.isoformat(timespec='seconds')}\n"
        f"Current user local time ({timezone}): {local_now.isoformat(timespec='seconds')}"
    )


def build_text_prompt(text: str, now: datetime, timezone: str) -> str:
    source = "the full original command"
    return "\n\n".join([
        f"{_ROLE} Analyze the command and extract structured information.",
        f'Command: "{text}"',
        _TASK.format(description_source=source),
        _EXAMPLES,
        _FORMAT.format(description_source=source),
        _clock_block(now, timezone),
        "Now analyze the command and respond:",
    ])


def build_audio_prompt(now: datetime, timezone: str) -> str:
    source = "the full transcription of the voice message"
    return "\n\n".join([
        f"{_ROLE} Listen to the attached audio and extract structured information.",
        _TASK.format(description_source=source),
        _FORMAT.format(description_source=source),
        _clock_block(now, timezone),
        "Now analyze the audio and respond:",
    ])
