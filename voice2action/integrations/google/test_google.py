import asyncio
import base64
from datetime import datetime, timedelta
from email import message_from_bytes
from email.header import decode_header, make_header
from typing import Any
from zoneinfo import ZoneInfo

import pytest

from voice2action.confirmations.models import CalendarPayload, EmailPayload
from voice2action.errors import DeliveryError
from voice2action.integrations.google.calendar import ATTRIBUTION, CalendarService, build_event_body
from voice2action.integrations.google.gmail import GmailService, encode_message

TZ = ZoneInfo("Europe/Berlin")
START = datetime(2025, 10, 4, 15, 0, tzinfo=TZ)


class _Call:
    def __init__(self, result: dict[str, Any] | Exception) -> None:
        self._result = result

    def execute(self) -> dict[str, Any]:
        if isinstance(self._result, Exception):
            raise self._result
        return self._result


class FakeGmail:
    def __init__(self, result: dict[str, Any] | Exception = {"id": "m1"}) -> None:
        self.result = result
        self.bodies: list[dict[str, Any]] = []

    def users(self) -> "FakeGmail":
        return self

    def messages(self) -> "FakeGmail":
        return self

    def send(self, userId: str, body: dict[str, Any]) -> _Call:
        self.bodies.append(body)
        return _Call(self.result)


class FakeCalendar:
    def __init__(self) -> None:
        self.inserted: list[tuple[str, dict[str, Any]]] = []

    def events(self) -> "FakeCalendar":
        return self

    def insert(self, calendarId: str, body: dict[str, Any]) -> _Call:
        self.inserted.append((calendarId, body))
        return _Call({"id": "e1"})


def test_encode_message_handles_utf8_subject() -> None:
    raw = encode_message(EmailPayload(to="a@b.io", subject="Привет", body="Текст письма"))

    msg = message_from_bytes(base64.urlsafe_b64decode(raw))
    assert msg["To"] == "a@b.io"
    assert str(make_header(decode_header(msg["Subject"]))) == "Привет"
    assert msg.get_content_type() == "text/plain"


def test_gmail_send_returns_confirmation() -> None:
    fake = FakeGmail()
    service = GmailService(token_path=None, service_factory=lambda: fake)

    result = asyncio.run(service.send(EmailPayload(to="a@b.io", subject="Hi", body="hello")))

    assert result == "Email sent to a@b.io"
    assert "raw" in fake.bodies[0]


def test_gmail_requires_recipient() -> None:
    service = GmailService(token_path=None, service_factory=lambda: FakeGmail())

    with pytest.raises(DeliveryError, match="Recipient"):
        asyncio.run(service.send(EmailPayload(to="", subject="Hi", body="hello")))


def test_gmail_api_error_becomes_delivery_error() -> None:
    service = GmailService(token_path=None, service_factory=lambda: FakeGmail(RuntimeError("quota")))

    with pytest.raises(DeliveryError, match="quota"):
        asyncio.run(service.send(EmailPayload(to="a@b.io", subject="Hi", body="hello")))


def test_event_body_adds_attribution_once_and_fixes_end() -> None:
    payload = CalendarPayload(
        title="Созвон",
        start_time=START,
        end_time=START - timedelta(hours=2),
        description=f"созвон\n\n{ATTRIBUTION}",
        color_id="11",
    )

    body = build_event_body(payload, "Europe/Berlin", START)

    assert body["description"].count(ATTRIBUTION) == 1
    assert body["colorId"] == "11"
    assert body["start"] == {"dateTime": START.isoformat(), "timeZone": "Europe/Berlin"}
    assert body["end"]["dateTime"] == (START + timedelta(hours=1)).isoformat()


def test_calendar_create_event() -> None:
    fake = FakeCalendar()
    service = CalendarService(token_path=None, calendar_id="team", service_factory=lambda: fake)
    payload = CalendarPayload(
        title="Тренировка",
        start_time=START,
        end_time=START + timedelta(hours=1),
        description="тренировка",
        color_id="9",
    )

    result = asyncio.run(service.create_event(payload))

    calendar_id, body = fake.inserted[0]
    assert calendar_id == "team"
    assert body["summary"] == "Тренировка"
    assert body["description"].endswith(ATTRIBUTION)
    assert result == 'Event "Тренировка" scheduled for 04.10.2025 15:00 - 04.10.2025 16:00'


def test_calendar_requires_title() -> None:
    service = CalendarService(token_path=None, service_factory=lambda: FakeCalendar())
    payload = CalendarPayload(title="", start_time=START, end_time=START, description="", color_id="7")

    with pytest.raises(DeliveryError, match="title"):
        asyncio.run(service.create_event(payload))
