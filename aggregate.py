import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from datetime import date, datetime, time
from typing import Callable, Iterable
from zoneinfo import ZoneInfo

from config import DEFAULT_TIMEZONE_NAME, Settings
from errors import ConfigurationError, FetchError
from get_data.ical_feed import get_feed_entries
from schemas import CalendarEvent, CalendarResponse, EventTime, Location, Origin, RawEntry

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = ZoneInfo(DEFAULT_TIMEZONE_NAME)

CONFIG_ERROR_MESSAGE = "カレンダーURLが設定されていません"
FETCH_ERROR_MESSAGE = "カレンダーの取得に失敗しました"
UNKNOWN_ERROR_DETAILS = "未知のエラー"

FeedFetcher = Callable[[str], list[RawEntry]]


# =============================================================================
# 정규화
# =============================================================================

def _to_instant(value: date | datetime, tz: ZoneInfo) -> datetime:
    """
    피드의 시작/종료 값을 tz 기준의 aware datetime으로 맞춥니다.
    - aware datetime: tz로 변환
    - floating(naive) datetime: tz의 현지 시각으로 간주
    - date (종일 일정): tz 기준 자정
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=tz)
        return value.astimezone(tz)
    return datetime.combine(value, time.min, tzinfo=tz)


def _normalize_entry(entry: RawEntry, origin: Origin, tz: ZoneInfo) -> CalendarEvent:
    label = tz.key
    location = entry.get("location")
    return CalendarEvent(
        id=entry["uid"],
        subject=entry.get("summary"),
        start=EventTime(_to_instant(entry["start"], tz), label),
        end=EventTime(_to_instant(entry["end"], tz), label),
        origin=origin,
        location=Location(location) if location else None,
        description=entry.get("description"),
    )


def normalize_entries(
    entries: Iterable[RawEntry],
    origin: Origin,
    tz: ZoneInfo = DEFAULT_TIMEZONE,
) -> list[CalendarEvent]:
    """
    한 피드의 엔트리 중 VEVENT만 골라 CalendarEvent로 변환하고 origin을 붙입니다.
    피드 순서를 그대로 유지합니다.
    """
    events = []
    for entry in entries:
        if entry.get("type") != "VEVENT":
            logger.debug("Skipping %s entry from %s", entry.get("type"), origin.value)
            continue
        events.append(_normalize_entry(entry, origin, tz))
    return events


# =============================================================================
# 집계
# =============================================================================

def _fetch_both(fetch: FeedFetcher, source_a: str, source_b: str) -> tuple[list[RawEntry], list[RawEntry]]:
    """
    두 피드를 동시에 가져옵니다. 하나라도 실패하면 다른 쪽을 기다리지 않고 바로 FetchError.
    """
    executor = ThreadPoolExecutor(max_workers=2)
    try:
        future_a = executor.submit(fetch, source_a)
        future_b = executor.submit(fetch, source_b)
        wait([future_a, future_b], return_when=FIRST_EXCEPTION)

        # 먼저 실패한 쪽을 보고, 다른 쪽 결과는 버림
        for future, url in ((future_a, source_a), (future_b, source_b)):
            if future.done() and future.exception() is not None:
                exc = future.exception()
                raise FetchError(f"Failed to fetch {url}: {exc}", cause=exc) from exc

        return future_a.result(), future_b.result()
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def aggregate(
    source_a: str | None,
    source_b: str | None,
    tz: ZoneInfo = DEFAULT_TIMEZONE,
    fetch: FeedFetcher = get_feed_entries,
) -> list[CalendarEvent]:
    """
    두 캘린더 피드를 가져와 정규화한 뒤 하나의 리스트로 합칩니다.

    Args:
        source_a: 첫 번째 피드 URL (calendar1)
        source_b: 두 번째 피드 URL (calendar2)
        tz: 시각을 표현할 타임존. 라벨로도 사용됨
        fetch: URL -> [RawEntry] 함수

    Returns:
        source_a의 이벤트 뒤에 source_b의 이벤트를 이어 붙인 리스트 (정렬하지 않음)

    Raises:
        ConfigurationError: URL이 하나라도 비어 있을 때 (네트워크 접근 없음)
        FetchError: 어느 한 쪽이라도 가져오기/파싱에 실패했을 때
    """
    if not source_a or not source_a.strip() or not source_b or not source_b.strip():
        raise ConfigurationError("Both calendar feed URLs must be set")

    entries_a, entries_b = _fetch_both(fetch, source_a, source_b)

    try:
        events_a = normalize_entries(entries_a, Origin.CALENDAR1, tz)
        events_b = normalize_entries(entries_b, Origin.CALENDAR2, tz)
    except Exception as exc:
        # uid/dtstart가 없는 VEVENT, 범위를 벗어난 시각 등 피드 내용이 잘못된 경우
        raise FetchError(f"Malformed calendar feed: {exc!r}", cause=exc) from exc

    logger.info(
        "Aggregated %d events (%s: %d, %s: %d)",
        len(events_a) + len(events_b),
        Origin.CALENDAR1.value, len(events_a),
        Origin.CALENDAR2.value, len(events_b),
    )
    return events_a + events_b


def error_response(exc: ConfigurationError | FetchError) -> tuple[int, CalendarResponse]:
    """예외를 (상태 코드, 오류 응답)으로 바꿉니다. FetchError는 여기서 로그를 남깁니다."""
    if isinstance(exc, ConfigurationError):
        return 400, {"error": CONFIG_ERROR_MESSAGE}

    logger.error("Calendar fetch error: %s", exc, exc_info=exc.cause)
    details = str(exc.cause) if exc.cause is not None else ""
    return 500, {"error": FETCH_ERROR_MESSAGE, "details": details or UNKNOWN_ERROR_DETAILS}


def load_calendar(
    settings: Settings,
    fetch: FeedFetcher = get_feed_entries,
) -> tuple[list[CalendarEvent], int, CalendarResponse]:
    """
    설정의 두 URL로 aggregate를 호출하고 결과를 응답 형태로도 만듭니다.
    화면(app.py)과 get_public_calendar가 함께 씁니다.

    Returns:
        (이벤트 리스트, 상태 코드, 응답) - 실패 시 이벤트 리스트는 비어 있음
    """
    try:
        events = aggregate(settings.calendar1_url, settings.calendar2_url, settings.timezone, fetch)
    except (ConfigurationError, FetchError) as exc:
        status, response = error_response(exc)
        return [], status, response

    return events, 200, {"value": [event.to_payload() for event in events]}


def get_public_calendar(
    settings: Settings,
    fetch: FeedFetcher = get_feed_entries,
) -> tuple[int, CalendarResponse]:
    """
    API 경계: 이벤트 객체 없이 (상태 코드, 응답)만 반환합니다.

    Returns:
        (상태 코드, 응답) - 200 {"value": [...]}, 400/500 {"error": ..., "details"?: ...}
    """
    _, status, response = load_calendar(settings, fetch)
    return status, response
