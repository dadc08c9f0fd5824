# /teacherboard/routers/sessions_router.py

"""
The teacher-facing sharing settings: create a student session, switch it on
and off, choose what students can see, and retire the code for a new one.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, Request, WebSocket, status

from ..config import get_settings
from ..core.deps import get_current_teacher, get_document_store, teacher_from_token
from ..core.exceptions import AuthenticationError, CodeGenerationError, SessionNotFoundError, ValidationError, WriteFailure
from ..models import session_model
from ..models.auth_model import TeacherAccount
from ..services import session_registry
from ..services.document_store import DocumentStore
from .subscriptions import stream_snapshots

router = APIRouter()


def _origin(request: Request) -> str:
    return get_settings().public_base_url or str(request.base_url).rstrip("/")


def _with_url(session: dict, request: Request) -> dict:
    return {**session, "publicUrl": session_registry.public_url(_origin(request), session["sessionCode"])}


def _not_found(e: SessionNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("", response_model=session_model.Session, status_code=status.HTTP_201_CREATED, summary="Create a Student Session")
def create_session(
    session_create: session_model.SessionCreate,
    request: Request,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    teacher_name = current_teacher.displayName or current_teacher.email or "선생님"
    try:
        session = session_registry.create_session(store, current_teacher.uid, teacher_name, session_create.className)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except (CodeGenerationError, WriteFailure) as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return _with_url(session, request)


@router.get("/current", response_model=session_model.Session, summary="Get the Current Student Session")
def get_current_session(
    request: Request,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    session = session_registry.get_current_session(store, current_teacher.uid)
    if session is None:
        raise _not_found(SessionNotFoundError(current_teacher.uid))
    return _with_url(session, request)


@router.put("/current/active", response_model=session_model.Session, summary="Activate or Deactivate the Session")
def set_session_active(
    toggle: session_model.ActiveToggle,
    request: Request,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    try:
        session = session_registry.set_active(store, current_teacher.uid, toggle.isActive)
    except SessionNotFoundError as e:
        raise _not_found(e)
    except WriteFailure as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return _with_url(session, request)


@router.patch("/current/settings", response_model=session_model.SessionSettings, summary="Change What Students Can See")
def update_session_settings(
    patch: session_model.SettingsPatch,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    try:
        return session_registry.update_settings(store, current_teacher.uid, patch.model_dump(exclude_none=True))
    except SessionNotFoundError as e:
        raise _not_found(e)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.post("/current/regenerate", response_model=session_model.RegenerateResponse, summary="Replace the Session Code")
def regenerate_session_code(
    request: Request,
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    try:
        new_code = session_registry.regenerate_code(store, current_teacher.uid)
    except SessionNotFoundError as e:
        raise _not_found(e)
    except (CodeGenerationError, WriteFailure) as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return {"sessionCode": new_code, "publicUrl": session_registry.public_url(_origin(request), new_code)}


@router.post("/current/reconcile", response_model=session_model.ReconcileResponse, summary="Repair the Public Session Entry")
def reconcile_session(
    store: DocumentStore = Depends(get_document_store),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    return {"repaired": session_registry.reconcile(store, current_teacher.uid)}


@router.websocket("/current/subscribe")
async def subscribe_to_session(websocket: WebSocket, token: str = Query(default=""), store: DocumentStore = Depends(get_document_store)):
    """Streams the teacher's session pointer every time it changes."""
    try:
        teacher = teacher_from_token(token)
    except AuthenticationError:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    await stream_snapshots(
        websocket,
        lambda callback: store.subscribe(session_registry.pointer_path(teacher.uid), callback),
        "session",
        lambda pointer: session_registry.session_from_pointer(pointer, teacher.uid),
    )
