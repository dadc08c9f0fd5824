# /tests/test_schedule_service.py

import io
from datetime import date

import pandas as pd
import pytest

from teacherboard.core.exceptions import ContentNotFoundError
from teacherboard.models.schedule_model import CalendarView, EventCreate
from teacherboard.services import schedule_service


def make_event(**overrides):
    fields = {"title": "학부모 상담", "startDate": date(2024, 5, 14), "category": "consultation"}
    fields.update(overrides)
    return EventCreate(**fields)


def test_create_defaults_end_date_and_owner(store):
    event = schedule_service.create_event(store, "t1", make_event())

    assert event["endDate"] == "2024-05-14"
    assert event["userId"] == "t1"
    assert event["createdAt"]


def test_events_are_listed_by_start_date(store):
    schedule_service.create_event(store, "t1", make_event(title="나중", startDate=date(2024, 6, 1)))
    schedule_service.create_event(store, "t1", make_event(title="먼저", startDate=date(2024, 3, 2)))

    titles = [e["title"] for e in schedule_service.list_events(store, "t1")]

    assert titles == ["먼저", "나중"]


def test_update_keeps_created_at(store):
    event = schedule_service.create_event(store, "t1", make_event())
    updated = schedule_service.update_event(store, "t1", event["id"], make_event(title="상담 변경", isImportant=True))

    assert updated["title"] == "상담 변경"
    assert updated["isImportant"] is True
    assert updated["createdAt"] == event["createdAt"]


def test_missing_events_raise(store):
    with pytest.raises(ContentNotFoundError):
        schedule_service.get_event(store, "t1", "nope")
    with pytest.raises(ContentNotFoundError):
        schedule_service.delete_event(store, "t1", "nope")
    with pytest.raises(ContentNotFoundError):
        schedule_service.update_event(store, "t1", "nope", make_event())


def test_end_before_start_is_rejected():
    with pytest.raises(ValueError):
        make_event(endDate=date(2024, 5, 1))


@pytest.mark.parametrize(
    "view, expected",
    [
        (CalendarView.DAY, (date(2024, 5, 15), date(2024, 5, 15))),
        # 2024-05-15 is a Wednesday; the week runs Sunday to Saturday.
        (CalendarView.WEEK, (date(2024, 5, 12), date(2024, 5, 18))),
        (CalendarView.MONTH, (date(2024, 5, 1), date(2024, 5, 31))),
        (CalendarView.YEAR, (date(2024, 1, 1), date(2024, 12, 31))),
    ],
)
def test_view_range(view, expected):
    assert schedule_service.view_range(view, date(2024, 5, 15)) == expected


def test_week_containing_a_sunday_starts_on_it():
    assert schedule_service.view_range(CalendarView.WEEK, date(2024, 5, 12))[0] == date(2024, 5, 12)


def test_events_for_view_includes_overlapping_events():
    events = [
        {"id": "a", "startDate": "2024-05-10", "endDate": "2024-05-13"},
        {"id": "b", "startDate": "2024-05-20", "endDate": "2024-05-20"},
        {"id": "c", "startDate": "2024-05-18"},
    ]
    selected = schedule_service.events_for_view(events, CalendarView.WEEK, date(2024, 5, 15))
    assert [e["id"] for e in selected] == ["a", "c"]


def test_dday_labels():
    assert schedule_service.dday_label(0) == "D-DAY"
    assert schedule_service.dday_label(3) == "D-3"
    assert schedule_service.dday_label(-2) == "D+2"


def test_upcoming_ddays_only_counts_future_important_events():
    today = date(2024, 5, 15)
    events = [
        {"id": "past", "title": "지난 행사", "startDate": "2024-05-01", "isImportant": True},
        {"id": "later", "title": "운동회", "startDate": "2024-05-25", "isImportant": True},
        {"id": "today", "title": "시험", "startDate": "2024-05-15", "isImportant": True},
        {"id": "minor", "title": "회의", "startDate": "2024-05-16", "isImportant": False},
    ]

    ddays = schedule_service.upcoming_ddays(events, today)

    assert [(d["id"], d["label"]) for d in ddays] == [("today", "D-DAY"), ("later", "D-10")]


def test_upcoming_ddays_is_capped():
    events = [
        {"id": str(i), "title": f"e{i}", "startDate": f"2024-06-{i + 1:02d}", "isImportant": True}
        for i in range(15)
    ]
    assert len(schedule_service.upcoming_ddays(events, date(2024, 5, 1))) == schedule_service.UPCOMING_DDAY_LIMIT


def test_calendar_grid_pads_whole_weeks():
    events = [{"id": "a", "title": "여행", "startDate": "2024-05-31", "endDate": "2024-06-01"}]

    grid = schedule_service.calendar_grid(events, 2024, 5)

    weeks = grid["weeks"]
    assert all(len(week) == 7 for week in weeks)
    # May 2024 starts on a Wednesday, so the first row begins on Sunday April 28.
    assert weeks[0][0]["date"] == date(2024, 4, 28)
    assert weeks[0][0]["inMonth"] is False
    last_row = weeks[-1]
    assert [d["date"] for d in last_row if d["events"]] == [date(2024, 5, 31), date(2024, 6, 1)]


def test_calendar_grid_rejects_bad_month():
    with pytest.raises(ValueError):
        schedule_service.calendar_grid([], 2024, 13)


def test_export_events_as_csv():
    events = [{
        "title": "운동회", "startDate": "2024-05-25", "endDate": "2024-05-25",
        "category": "school-event", "isImportant": True, "location": "운동장",
    }]

    frame = pd.read_csv(io.StringIO(schedule_service.export_events_as_csv(events)), keep_default_na=False)

    assert list(frame.columns) == schedule_service.CSV_COLUMNS
    row = frame.iloc[0]
    assert row["분류"] == "학교 행사"
    assert row["중요"] == "Y"
    assert row["장소"] == "운동장"


def test_export_without_events_keeps_the_header():
    assert schedule_service.export_events_as_csv([]).splitlines()[0] == ",".join(schedule_service.CSV_COLUMNS)
