import html
import logging
from datetime import date, datetime
from typing import Mapping, NamedTuple

import streamlit as st
from aggregate import load_calendar
from config import get_settings
from schemas import CalendarEvent, GridView, Origin, TimeSlot
from timetable import TIME_SLOTS, build_grid, shift_month, unplaced_events, weekday_label

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

st.set_page_config(page_title="ラウンジ予約状況", page_icon="📅", layout="wide")


# =============================================================================
# 캘린더별 표시 스타일 (화면 전용)
# =============================================================================
class CalendarStyle(NamedTuple):
    icon: str
    label: str
    border_color: str
    background: str
    text_color: str


CALENDAR_STYLES: dict[Origin, CalendarStyle] = {
    Origin.CALENDAR1: CalendarStyle("6️⃣", "6Fラウンジ", "#bfdbfe", "#eff6ff", "#1e40af"),
    Origin.CALENDAR2: CalendarStyle("5️⃣", "5Fラウンジ", "#bbf7d0", "#f0fdf4", "#166534"),
}


# =============================================================================
# HTML 생성 함수
# =============================================================================
def render_event_card(event: CalendarEvent, styles: Mapping[Origin, CalendarStyle]) -> str:
    """이벤트 하나를 카드 형태의 HTML로 만듭니다."""
    style = styles[event.origin]
    lines = [f"{style.icon} {html.escape(event.subject or '')}"]
    if event.location is not None:
        lines.append(f"📍 {html.escape(event.location.display_name)}")

    return (
        f'<div style="border:1px solid {style.border_color};background:{style.background};'
        f'color:{style.text_color};border-radius:6px;padding:4px 6px;margin:2px 0;font-size:0.8rem">'
        + "<br>".join(lines)
        + "</div>"
    )


def _row_background(day: date, row_index: int, today: date) -> str:
    if day == today:
        return "#fef9c3"
    if day.isoweekday() == 7:
        return "#fef2f2"
    if day.isoweekday() == 6:
        return "#eff6ff"
    return "#ffffff" if row_index % 2 == 0 else "#f9fafb"


def render_grid(
    grid: GridView,
    time_slots: tuple[TimeSlot, ...],
    styles: Mapping[Origin, CalendarStyle],
    today: date,
) -> str:
    """한 달치 시간표를 HTML 테이블로 만듭니다."""
    header = "".join(
        f"<th>{html.escape(slot.name)}<br><small>"
        f"{slot.start_hour}:{slot.start_minute:02d}-{slot.end_hour}:{slot.end_minute:02d}</small></th>"
        for slot in time_slots
    )
    rows = []
    for row_index, row in enumerate(grid):
        cells = "".join(
            "<td style='vertical-align:top'>"
            + "".join(render_event_card(event, styles) for event in row.cells[slot])
            + "</td>"
            for slot in time_slots
        )
        background = _row_background(row.day, row_index, today)
        rows.append(
            f"<tr style='background:{background}'>"
            f"<td>{row.day.month}/{row.day.day} ({weekday_label(row.day)})</td>{cells}</tr>"
        )

    return (
        "<table style='width:100%;border-collapse:collapse'>"
        f"<thead><tr><th>日付</th>{header}</tr></thead>"
        f"<tbody>{''.join(rows)}</tbody></table>"
    )


st.title("📅 ラウンジ予約状況")

# =============================================================================
# 표시할 달 (세션에 저장)
# =============================================================================
if "current_month" not in st.session_state:
    st.session_state.current_month = shift_month(date.today(), 0)

current_month: date = st.session_state.current_month

col1, col2, col3, col4 = st.columns([4, 1, 1, 1])
with col1:
    st.subheader(f"{current_month.year}年{current_month.month}月")
with col2:
    if st.button("前月", use_container_width=True):
        st.session_state.current_month = shift_month(current_month, -1)
        st.rerun()
with col3:
    if st.button("今月", use_container_width=True):
        st.session_state.current_month = shift_month(date.today(), 0)
        st.rerun()
with col4:
    if st.button("翌月", use_container_width=True):
        st.session_state.current_month = shift_month(current_month, 1)
        st.rerun()

# 범례
st.markdown("　".join(f"{style.icon} {style.label}" for style in CALENDAR_STYLES.values()))

# =============================================================================
# 메인 UI
# =============================================================================
settings = get_settings()

with st.spinner("読み込み中..."):
    events, status, response = load_calendar(settings)

if status != 200:
    st.error(f"❌ {response['error']}")
    if "details" in response:
        st.caption(response["details"])
    st.stop()

grid = build_grid(events, current_month, TIME_SLOTS)
st.markdown(render_grid(grid, TIME_SLOTS, CALENDAR_STYLES, datetime.now(settings.timezone).date()), unsafe_allow_html=True)

hidden = unplaced_events(events, current_month, TIME_SLOTS)
if hidden:
    st.caption(f"※ 時限の開始時刻と一致しない予約 {len(hidden)} 件は表示されていません")
