"""
iCalendar 피드 추출 모듈

"""

import requests
from datetime import date, datetime, timedelta
from icalendar import Calendar
from schemas import RawEntry

REQUEST_TIMEOUT = 30  # 초


def _normalize_url(url: str) -> str:
    """webcal:// 링크는 https:// 로 바꿔서 요청합니다."""
    if url.startswith("webcal://"):
        return "https://" + url[len("webcal://"):]
    return url


def _get_ics(url: str) -> bytes:
    """피드 URL에서 .ics 원문을 가져옵니다."""
    headers = {
        "Accept": "text/calendar, */*;q=0.8",
        "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    }
    response = requests.get(_normalize_url(url), headers=headers, timeout=REQUEST_TIMEOUT)
    response.raise_for_status()
    return response.content


def _resolve_end(component) -> date | datetime | None:
    """
    DTEND가 없으면 DURATION, 그것도 없으면 종일 일정은 하루 뒤, 그 외엔 시작 시각.
    """
    if "DTEND" in component:
        return component.decoded("DTEND")
    if "DTSTART" not in component:
        return None

    start = component.decoded("DTSTART")
    if "DURATION" in component:
        return start + component.decoded("DURATION")
    if not isinstance(start, datetime):
        return start + timedelta(days=1)
    return start


def _to_entry(component) -> RawEntry:
    entry: RawEntry = {"type": component.name}

    for key in ("uid", "summary", "location", "description"):
        value = component.get(key)
        if value is not None:
            entry[key] = str(value)

    if "DTSTART" in component:
        entry["start"] = component.decoded("DTSTART")
    end = _resolve_end(component)
    if end is not None:
        entry["end"] = end

    return entry


def parse_feed(raw: bytes | str) -> list[RawEntry]:
    """
    .ics 원문을 컴포넌트 단위의 엔트리 리스트로 변환합니다.
    VEVENT 외의 컴포넌트(VCALENDAR, VTIMEZONE 등)도 그대로 포함됩니다.
    """
    calendar = Calendar.from_ical(raw)
    return [_to_entry(component) for component in calendar.walk()]


def get_feed_entries(url: str) -> list[RawEntry]:
    """
    피드 URL에서 데이터를 가져와 엔트리 리스트로 반환합니다.

    Args:
        url: 공개 캘린더 (.ics) URL

    Returns:
        [RawEntry, ...] 피드에 있는 순서대로
    """
    return parse_feed(_get_ics(url))
