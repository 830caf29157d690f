"""Google Calendar collaborator: creates confirmed calendar events."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from loguru import logger

from voice2action.confirmations.models import CalendarPayload
from voice2action.errors import DeliveryError
from voice2action.integrations.google.oauth import build_service
from voice2action.intent.timewindow import normalize_window

ATTRIBUTION = "Event created by the Voice2Action assistant."


def with_attribution(description: str) -> str:
    if ATTRIBUTION in description:
        return description
    return f"{description}\n\n{ATTRIBUTION}".strip()


def build_event_body(payload: CalendarPayload, timezone: str, now: datetime) -> dict[str, Any]:
    start, end = normalize_window(payload.start_time, payload.end_time, now)
    body: dict[str, Any] = {
        "summary": payload.title,
        "description": with_attribution(payload.description),
        "start": {"dateTime": start.isoformat(), "timeZone": timezone},
        "end": {"dateTime": end.isoformat(), "timeZone": timezone},
    }
    if payload.color_id:
        body["colorId"] = payload.color_id
    return body


class CalendarService:
    def __init__(
        self,
        token_path: Path,
        timezone: str = "Europe/Berlin",
        calendar_id: str = "primary",
        service_factory: Callable[[], Any] | None = None,
    ) -> None:
        self._timezone = timezone
        self._tz = ZoneInfo(timezone)
        self._calendar_id = calendar_id
        self._factory = service_factory or (lambda: build_service("calendar", "v3", token_path))
        self._service: Any = None

    async def create_event(self, payload: CalendarPayload) -> str:
        if not payload.title:
            raise DeliveryError("Event title is required")

        if self._service is None:
            self._service = await asyncio.to_thread(self._factory)

        body = build_event_body(payload, self._timezone, datetime.now(self._tz))
        try:
            res = await asyncio.to_thread(
                lambda: self._service.events().insert(calendarId=self._calendar_id, body=body).execute()
            )
        except Exception as e:
            logger.error(f"Error creating calendar event: {e}")
            raise DeliveryError(f"Failed to create event: {e}") from e

        logger.info(f"Calendar event created: {res.get('id')}")
        start = datetime.fromisoformat(body["start"]["dateTime"]).astimezone(self._tz)
        end = datetime.fromisoformat(body["end"]["dateTime"]).astimezone(self._tz)
        return f'Event "{payload.title}" scheduled for {start:%d.%m.%Y %H:%M} - {end:%d.%m.%Y %H:%M}'
