# /teacherboard/routers/timetable_router.py

from fastapi import APIRouter, Depends, HTTPException, status

from ..core.deps import get_current_teacher, get_document_store
from ..core.exceptions import ValidationError
from ..models import timetable_model
from ..models.auth_model import TeacherAccount
from ..services import timetable_service
from ..services.document_store import DocumentStore

router = APIRouter()


@router.get("", response_model=timetable_model.Timetable, summary="Get the Timetable")
def get_timetable(
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    return timetable_service.get_timetable(store, current_teacher.uid)


@router.put("", response_model=timetable_model.Timetable, summary="Replace the Timetable")
def save_timetable(
    timetable_update: timetable_model.TimetableUpdate,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    try:
        return timetable_service.save_timetable(store, current_teacher.uid, timetable_update.periods)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.get("/subjects", response_model=timetable_model.SubjectList, summary="Suggested Subjects")
def get_subjects():
    return timetable_model.SubjectList()
