# /teacherboard/routers/schedule_router.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import StreamingResponse

from ..core.deps import get_current_teacher, get_document_store
from ..core.exceptions import ContentNotFoundError
from ..models import schedule_model
from ..models.auth_model import TeacherAccount
from ..services import schedule_service
from ..services.document_store import DocumentStore

router = APIRouter()

# --- EVENT COLLECTION ENDPOINTS (/api/schedule/events) ---

@router.get("/events", response_model=List[schedule_model.Event], summary="List Events")
def list_events(
    view: Optional[schedule_model.CalendarView] = None,
    on: Optional[date] = Query(default=None, description="Any date inside the requested view. Defaults to today."),
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    events = schedule_service.list_events(store, current_teacher.uid)
    if view is None:
        return events
    return schedule_service.events_for_view(events, view, on or date.today())


@router.post("/events", response_model=schedule_model.Event, status_code=status.HTTP_201_CREATED, summary="Create an Event")
def create_event(
    event_create: schedule_model.EventCreate,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    return schedule_service.create_event(store, current_teacher.uid, event_create)


@router.get("/events/export", summary="Export Events as CSV", response_class=StreamingResponse)
def export_events_csv(
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    csv_string = schedule_service.export_events_as_csv(schedule_service.list_events(store, current_teacher.uid))
    # BOM so spreadsheet apps detect UTF-8 for the Korean headers.
    return StreamingResponse(
        iter(["﻿" + csv_string]),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": "attachment; filename=schedule.csv"},
    )


# --- INDIVIDUAL EVENT ENDPOINTS (/api/schedule/events/{event_id}) ---

@router.put("/events/{event_id}", response_model=schedule_model.Event, summary="Update an Event")
def update_event(
    event_id: str,
    event_update: schedule_model.EventCreate,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    try:
        return schedule_service.update_event(store, current_teacher.uid, event_id, event_update)
    except ContentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an Event")
def delete_event(
    event_id: str,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    try:
        schedule_service.delete_event(store, current_teacher.uid, event_id)
    except ContentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- DERIVED VIEWS ---

@router.get("/ddays", response_model=List[schedule_model.DDay], summary="Upcoming Important Events")
def get_upcoming_ddays(
    today: Optional[date] = None,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    events = schedule_service.list_events(store, current_teacher.uid)
    return schedule_service.upcoming_ddays(events, today or date.today())


@router.get("/calendar/{year}/{month}", response_model=schedule_model.CalendarGrid, summary="Month Calendar Grid")
def get_calendar_grid(
    year: int,
    month: int,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    try:
        return schedule_service.calendar_grid(schedule_service.list_events(store, current_teacher.uid), year, month)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
