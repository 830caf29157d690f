"""Event start/end normalisation.

Rules: a missing or unparseable start becomes "now" in the user's timezone;
a missing, unparseable or non-positive end becomes start + 1 hour.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, tzinfo

from loguru import logger

DEFAULT_EVENT_DURATION = timedelta(hours=1)


def parse_timestamp(value: str | None, tz: tzinfo) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are read in *tz*.

    Returns None for empty, unparseable or out-of-range input instead of raising.
    """
    if not value:
        return None
    raw = value.strip().strip("\"'")
    if not raw:
        return None
    if raw.endswith(("z", "Z")):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        logger.warning(f"Ignoring unparseable timestamp: {value!r}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    try:
        parsed.astimezone(UTC)
        parsed + DEFAULT_EVENT_DURATION
    except OverflowError:
        logger.warning(f"Ignoring out-of-range timestamp: {value!r}")
        return None
    return parsed


def normalize_window(
    start: datetime | None,
    end: datetime | None,
    now: datetime,
) -> tuple[datetime, datetime]:
    """Return a (start, end) pair where end is strictly after start.

    A start too close to the end of the calendar to fit an event is
    treated as absent.
    """
    resolved_start = start or now
    try:
        resolved_start + DEFAULT_EVENT_DURATION
    except OverflowError:
        logger.warning(f"Start time {resolved_start.isoformat()} is out of range, using now")
        resolved_start = now
    if end is None or end <= resolved_start:
        if end is not None:
            logger.warning(
                f"End time {end.isoformat()} is not after start {resolved_start.isoformat()}, adjusting"
            )
        return resolved_start, resolved_start + DEFAULT_EVENT_DURATION
    return resolved_start, end
