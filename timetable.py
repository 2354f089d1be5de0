from datetime import date, timedelta
from typing import Iterable, Sequence
from schemas import CalendarEvent, GridRow, GridView, TimeSlot


TIME_SLOTS: tuple[TimeSlot, ...] = (
    TimeSlot("1限", 8, 50, 10, 20),
    TimeSlot("2限", 10, 30, 12, 0),
    TimeSlot("昼休み", 12, 0, 13, 0),
    TimeSlot("3限", 13, 0, 14, 30),
    TimeSlot("4限", 14, 40, 16, 10),
    TimeSlot("5限", 16, 20, 17, 50),
)

# date.isoweekday() % 7 로 인덱싱 (일요일 시작)
WEEKDAY_LABELS = ("日", "月", "火", "水", "木", "金", "土")


# =============================================================================
# 1. 날짜 축
# =============================================================================

def get_days_in_month(reference: date) -> list[date]:
    """
    reference가 속한 달의 1일부터 말일까지의 날짜 리스트를 반환합니다.
    말일 = 다음 달 1일의 하루 전 (윤년, 12월 포함)
    """
    first_of_next = shift_month(reference, 1)
    last_day = first_of_next - timedelta(days=1)

    return [date(reference.year, reference.month, d) for d in range(1, last_day.day + 1)]


def shift_month(reference: date, months: int) -> date:
    """months만큼 이동한 달의 1일을 반환합니다. (1월 31일 + 1개월 = 2월 1일)"""
    index = reference.year * 12 + (reference.month - 1) + months
    year, month = divmod(index, 12)
    return date(year, month + 1, 1)


def weekday_label(day: date) -> str:
    return WEEKDAY_LABELS[day.isoweekday() % 7]


# =============================================================================
# 2. 시간표 칸 배치
# =============================================================================

def _starts_at(event: CalendarEvent, day: date, slot: TimeSlot) -> bool:
    # 종료 시각은 보지 않음. 시작 시각의 분 단위 완전 일치만 인정
    start = event.start.date_time
    return (
        start.year == day.year
        and start.month == day.month
        and start.day == day.day
        and start.hour == slot.start_hour
        and start.minute == slot.start_minute
    )


def get_events_for_time_slot(
    events: Iterable[CalendarEvent],
    day: date,
    slot: TimeSlot
) -> list[CalendarEvent]:
    """특정 날짜, 특정 교시에 시작하는 이벤트들을 입력 순서대로 반환합니다."""
    return [event for event in events if _starts_at(event, day, slot)]


def build_grid(
    events: Sequence[CalendarEvent],
    reference: date,
    time_slots: Sequence[TimeSlot] = TIME_SLOTS
) -> GridView:
    """
    한 달치 시간표를 만듭니다.

    Args:
        events: aggregate 결과
        reference: 표시할 달에 속한 아무 날짜
        time_slots: 교시 설정 (순서대로 열이 됨)

    Returns:
        [GridRow(day, {TimeSlot: [CalendarEvent, ...]}), ...] 날짜 오름차순
        어느 교시에도 맞지 않는 이벤트는 어디에도 나타나지 않습니다.
    """
    return [
        GridRow(day, {slot: get_events_for_time_slot(events, day, slot) for slot in time_slots})
        for day in get_days_in_month(reference)
    ]


def unplaced_events(
    events: Sequence[CalendarEvent],
    reference: date,
    time_slots: Sequence[TimeSlot] = TIME_SLOTS
) -> list[CalendarEvent]:
    """
    reference 달에 시작하지만 어느 교시 시작 시각과도 일치하지 않아
    시간표에 표시되지 않는 이벤트들.
    """
    starts = {(slot.start_hour, slot.start_minute) for slot in time_slots}
    return [
        event for event in events
        if event.start.date_time.year == reference.year
        and event.start.date_time.month == reference.month
        and (event.start.date_time.hour, event.start.date_time.minute) not in starts
    ]
