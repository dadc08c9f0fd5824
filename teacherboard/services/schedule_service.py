# /teacherboard/services/schedule_service.py

"""
Business logic for the teacher's schedule: event CRUD, calendar views,
upcoming D-Day counters and a CSV export.

Event dates are stored as ISO `YYYY-MM-DD` strings, so ordering by
`startDate` as text is also chronological.
"""

import calendar
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from ..core.exceptions import ContentNotFoundError
from ..models import schedule_model
from .document_store import DocumentStore, document_path, join_path

logger = logging.getLogger(__name__)

UPCOMING_DDAY_LIMIT = 10

CATEGORY_LABELS = {
    "holiday": "휴일",
    "school-event": "학교 행사",
    "personal": "개인 일정",
    "meeting": "회의",
    "consultation": "상담",
}

CSV_COLUMNS = ["제목", "시작일", "종료일", "시작 시간", "종료 시간", "분류", "중요", "장소", "설명"]


def _events_path(teacher_id: str) -> str:
    return join_path("users", teacher_id, "events")


def _event_path(teacher_id: str, event_id: str) -> str:
    try:
        return document_path(_events_path(teacher_id), event_id)
    except ValueError:
        raise ContentNotFoundError("Event", event_id)


def _as_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _event_record(event_data: schedule_model.EventCreate, teacher_id: str, created_at: Optional[str]) -> Dict[str, Any]:
    record = event_data.model_dump(mode="json")
    record["endDate"] = record.get("endDate") or record["startDate"]
    record["userId"] = teacher_id
    record["createdAt"] = created_at or datetime.now(timezone.utc).isoformat()
    return record


# --- CRUD ---

def list_events(store: DocumentStore, teacher_id: str) -> List[Dict[str, Any]]:
    return store.query(_events_path(teacher_id), order_by="startDate")


def get_event(store: DocumentStore, teacher_id: str, event_id: str) -> Dict[str, Any]:
    event = store.get(_event_path(teacher_id, event_id))
    if event is None:
        raise ContentNotFoundError("Event", event_id)
    return event


def create_event(store: DocumentStore, teacher_id: str, event_data: schedule_model.EventCreate) -> Dict[str, Any]:
    event_id = store.add(_events_path(teacher_id), _event_record(event_data, teacher_id, None))
    return get_event(store, teacher_id, event_id)


def update_event(store: DocumentStore, teacher_id: str, event_id: str, event_data: schedule_model.EventCreate) -> Dict[str, Any]:
    """Replaces an event's fields; its original `createdAt` is kept."""
    existing = get_event(store, teacher_id, event_id)
    store.set(_event_path(teacher_id, event_id), _event_record(event_data, teacher_id, existing.get("createdAt")))
    return get_event(store, teacher_id, event_id)


def delete_event(store: DocumentStore, teacher_id: str, event_id: str) -> None:
    if not store.delete(_event_path(teacher_id, event_id)):
        raise ContentNotFoundError("Event", event_id)


# --- Calendar helpers ---

def view_range(view: schedule_model.CalendarView, current: date) -> Tuple[date, date]:
    """The first and last day (inclusive) shown by a calendar view. Weeks start on Sunday."""
    if view == schedule_model.CalendarView.DAY:
        return current, current
    if view == schedule_model.CalendarView.WEEK:
        # date.weekday(): Monday is 0, Sunday is 6.
        start = current - timedelta(days=(current.weekday() + 1) % 7)
        return start, start + timedelta(days=6)
    if view == schedule_model.CalendarView.MONTH:
        last_day = calendar.monthrange(current.year, current.month)[1]
        return current.replace(day=1), current.replace(day=last_day)
    return date(current.year, 1, 1), date(current.year, 12, 31)


def events_for_view(events: List[Dict[str, Any]], view: schedule_model.CalendarView, current: date) -> List[Dict[str, Any]]:
    """Events overlapping the view's date range."""
    start, end = view_range(view, current)
    selected = []
    for event in events:
        event_start = _as_date(event["startDate"])
        event_end = _as_date(event.get("endDate") or event["startDate"])
        if event_start <= end and event_end >= start:
            selected.append(event)
    return selected


def dday_label(days: int) -> str:
    if days == 0:
        return "D-DAY"
    if days > 0:
        return f"D-{days}"
    return f"D+{abs(days)}"


def upcoming_ddays(events: List[Dict[str, Any]], today: date, max_count: int = UPCOMING_DDAY_LIMIT) -> List[Dict[str, Any]]:
    """Important events starting today or later, soonest first."""
    upcoming = []
    for event in events:
        if not event.get("isImportant"):
            continue
        start = _as_date(event["startDate"])
        if start < today:
            continue
        days = (start - today).days
        upcoming.append({
            "id": event["id"],
            "title": event["title"],
            "startDate": start,
            "days": days,
            "label": dday_label(days),
        })
    upcoming.sort(key=lambda item: item["startDate"])
    return upcoming[:max_count]


def calendar_grid(events: List[Dict[str, Any]], year: int, month: int) -> Dict[str, Any]:
    """A month as whole Sunday-first weeks, padded with days from the neighbouring months."""
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 1 and 12.")
    month_calendar = calendar.Calendar(firstweekday=calendar.SUNDAY)
    weeks = []
    for week in month_calendar.monthdatescalendar(year, month):
        days = []
        for day in week:
            day_events = [
                e for e in events
                if _as_date(e["startDate"]) <= day <= _as_date(e.get("endDate") or e["startDate"])
            ]
            days.append({"date": day, "inMonth": day.month == month, "events": day_events})
        weeks.append(days)
    return {"year": year, "month": month, "weeks": weeks}


# --- Export ---

def export_events_as_csv(events: List[Dict[str, Any]]) -> str:
    export_data = [
        {
            "제목": e.get("title", ""),
            "시작일": e.get("startDate", ""),
            "종료일": e.get("endDate") or e.get("startDate", ""),
            "시작 시간": e.get("startTime") or "",
            "종료 시간": e.get("endTime") or "",
            "분류": CATEGORY_LABELS.get(e.get("category"), e.get("category", "")),
            "중요": "Y" if e.get("isImportant") else "N",
            "장소": e.get("location") or "",
            "설명": e.get("description") or "",
        } for e in events
    ]

    df = pd.DataFrame(export_data) if export_data else pd.DataFrame(columns=CSV_COLUMNS)

    return df.to_csv(index=False)
