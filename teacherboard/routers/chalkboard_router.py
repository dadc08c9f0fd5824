# /teacherboard/routers/chalkboard_router.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ..core.deps import get_current_teacher, get_document_store
from ..core.exceptions import ValidationError
from ..models import content_model
from ..models.auth_model import TeacherAccount
from ..services import content_service
from ..services.document_store import DocumentStore

router = APIRouter()


@router.get("/notes", response_model=List[content_model.ChalkboardNote], summary="List Recent Chalkboard Notes")
def list_chalkboard_history(
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    return content_service.list_history(store, current_teacher.uid)


@router.post("/notes", response_model=content_model.ChalkboardNote, status_code=status.HTTP_201_CREATED, summary="Save the Chalkboard")
def save_chalkboard_note(
    note: content_model.ChalkboardNoteCreate,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    try:
        return content_service.save_note(store, current_teacher.uid, note.contentHtml, note.contentText, note.customTitle)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/share", response_model=content_model.ClassContent, status_code=status.HTTP_201_CREATED, summary="Share the Chalkboard with Students")
def share_chalkboard(
    note: content_model.ChalkboardNoteCreate,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    try:
        return content_service.share_with_students(store, current_teacher.uid, note.contentHtml, note.contentText, note.customTitle)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
