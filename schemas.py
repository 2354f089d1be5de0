from datetime import date, datetime, timezone
from enum import Enum
from typing import NamedTuple, Optional, TypedDict, List, Union


class Origin(str, Enum):
    """이벤트가 어느 캘린더(라운지)에서 왔는지. 두 값 외에는 없음."""
    CALENDAR1 = "calendar1"
    CALENDAR2 = "calendar2"


class RawEntry(TypedDict, total=False):
    type: str                           # 'VEVENT' | 'VTIMEZONE' | 'VCALENDAR' ...
    uid: str
    summary: str
    start: Union[date, datetime]
    end: Union[date, datetime]
    location: str
    description: str


class EventTime(NamedTuple):
    date_time: datetime                 # timezone-aware
    time_zone: str                      # 표시용 라벨 (예: 'Asia/Tokyo')

    def to_payload(self) -> dict:
        utc = self.date_time.astimezone(timezone.utc)
        return {
            "dateTime": utc.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "timeZone": self.time_zone,
        }


class Location(NamedTuple):
    display_name: str


class CalendarEvent(NamedTuple):
    id: str
    subject: Optional[str]
    start: EventTime
    end: EventTime
    origin: Origin
    location: Optional[Location] = None
    description: Optional[str] = None

    def to_payload(self) -> dict:
        """API 응답용 dict. 없는 필드는 키 자체를 생략합니다."""
        payload = {"id": self.id}
        if self.subject is not None:
            payload["subject"] = self.subject
        payload["start"] = self.start.to_payload()
        payload["end"] = self.end.to_payload()
        if self.location is not None:
            payload["location"] = {"displayName": self.location.display_name}
        if self.description is not None:
            payload["description"] = self.description
        payload["source"] = self.origin.value
        return payload


class TimeSlot(NamedTuple):
    name: str
    start_hour: int
    start_minute: int
    end_hour: int
    end_minute: int


class GridRow(NamedTuple):
    day: date
    cells: dict                         # {TimeSlot: [CalendarEvent, ...]} (설정 순서)


GridView = List[GridRow]


class CalendarResponse(TypedDict, total=False):
    value: List[dict]                   # 성공 시
    error: str                          # 실패 시 (사용자용 메시지)
    details: str                        # 실패 원인
