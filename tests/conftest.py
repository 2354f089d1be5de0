"""Shared fixtures for the timetable tests.

- Raw iCalendar feed text (two lounges, one with a VTIMEZONE block)
- A factory for normalized CalendarEvent objects
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from schemas import CalendarEvent, EventTime, Location, Origin


TOKYO = ZoneInfo("Asia/Tokyo")


# ─────────────────────────────────────────────────────────────────────────────
# Feed Fixtures
# ─────────────────────────────────────────────────────────────────────────────

ICS_LOUNGE_6F = "\r\n".join([
    "BEGIN:VCALENDAR",
    "VERSION:2.0",
    "PRODID:-//Test//Lounge 6F//JA",
    "BEGIN:VTIMEZONE",
    "TZID:Asia/Tokyo",
    "BEGIN:STANDARD",
    "DTSTART:19700101T000000",
    "TZOFFSETFROM:+0900",
    "TZOFFSETTO:+0900",
    "TZNAME:JST",
    "END:STANDARD",
    "END:VTIMEZONE",
    "BEGIN:VEVENT",
    "UID:meeting-1@lounge6f",
    "DTSTAMP:20240301T000000Z",
    "DTSTART;TZID=Asia/Tokyo:20240305T085000",
    "DTEND;TZID=Asia/Tokyo:20240305T102000",
    "SUMMARY:Meeting",
    "LOCATION:6F Lounge",
    "DESCRIPTION:Weekly sync",
    "END:VEVENT",
    "BEGIN:VEVENT",
    "UID:study-2@lounge6f",
    "DTSTAMP:20240301T000000Z",
    "DTSTART:20240306T013000Z",
    "DTEND:20240306T030000Z",
    "SUMMARY:Study group",
    "END:VEVENT",
    "END:VCALENDAR",
    "",
])

ICS_LOUNGE_5F = "\r\n".join([
    "BEGIN:VCALENDAR",
    "VERSION:2.0",
    "PRODID:-//Test//Lounge 5F//JA",
    "BEGIN:VEVENT",
    "UID:seminar-1@lounge5f",
    "DTSTAMP:20240301T000000Z",
    "DTSTART:20240304T054000Z",
    "DTEND:20240304T071000Z",
    "SUMMARY:Seminar",
    "END:VEVENT",
    "END:VCALENDAR",
    "",
])


@pytest.fixture
def lounge_6f_ics() -> str:
    return ICS_LOUNGE_6F


@pytest.fixture
def lounge_5f_ics() -> str:
    return ICS_LOUNGE_5F


# ─────────────────────────────────────────────────────────────────────────────
# Event Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_event() -> Callable[..., CalendarEvent]:
    """Build a normalized event starting at a Tokyo wall-clock time.

    Usage:
        event = make_event("a", 2024, 3, 5, 8, 50)
    """

    def _make(
        uid: str,
        year: int,
        month: int,
        day: int,
        hour: int,
        minute: int,
        duration_minutes: int = 90,
        origin: Origin = Origin.CALENDAR1,
        location: str | None = None,
    ) -> CalendarEvent:
        start = datetime(year, month, day, hour, minute, tzinfo=TOKYO)
        end = start + timedelta(minutes=duration_minutes)
        return CalendarEvent(
            id=uid,
            subject=f"Event {uid}",
            start=EventTime(start, "Asia/Tokyo"),
            end=EventTime(end, "Asia/Tokyo"),
            origin=origin,
            location=Location(location) if location else None,
        )

    return _make
