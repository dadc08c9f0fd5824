# /teacherboard/routers/student_router.py

"""
The public student surface. No authentication: the session code is the only
credential. Unknown and deactivated codes get the same response so that a
student cannot tell them apart.
"""

import asyncio
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from ..config import get_settings
from ..core.deps import get_document_store
from ..core.exceptions import STUDENT_ACCESS_ERROR_MESSAGE, InactiveSessionError, NotFoundError
from ..models.student_view_model import StudentView
from ..services import student_view_service
from ..services.document_store import DocumentStore

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "페이지를 불러오는 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

router = APIRouter()


async def _load(store: DocumentStore, session_code: str) -> dict:
    return await student_view_service.load_student_view_with_timeout(
        store, session_code, get_settings().student_view_timeout_seconds
    )


@router.get("/public/student/{session_code}", response_model=StudentView, summary="Get the Student View as JSON")
async def get_student_view(session_code: str, store: DocumentStore = Depends(get_document_store)):
    try:
        return await _load(store, session_code)
    except (NotFoundError, InactiveSessionError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=STUDENT_ACCESS_ERROR_MESSAGE)
    except asyncio.TimeoutError:
        logger.error("Student view for %s timed out", session_code)
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=LOAD_ERROR_MESSAGE)


@router.get("/student/{session_code}", response_class=HTMLResponse, include_in_schema=False)
async def render_student_page(request: Request, session_code: str, store: DocumentStore = Depends(get_document_store)):
    page = student_view_service.StudentViewPage(
        session_code, lambda code: student_view_service.load_student_view_on_own_session(store, code)
    )
    try:
        await asyncio.wait_for(asyncio.to_thread(page.load), timeout=get_settings().student_view_timeout_seconds)
    except asyncio.TimeoutError:
        logger.error("Student page for %s timed out", session_code)
        page.state, page.error = student_view_service.PageState.ERROR, LOAD_ERROR_MESSAGE

    PageState = student_view_service.PageState
    status_code = {
        PageState.READY: status.HTTP_200_OK,
        PageState.NOT_FOUND: status.HTTP_404_NOT_FOUND,
        PageState.INACTIVE: status.HTTP_404_NOT_FOUND,
    }.get(page.state, status.HTTP_500_INTERNAL_SERVER_ERROR)

    context = {
        "session_code": session_code,
        "state": page.state.value,
        "view": StudentView(**page.view) if page.state == PageState.READY else None,
        "error": STUDENT_ACCESS_ERROR_MESSAGE if page.state in (PageState.NOT_FOUND, PageState.INACTIVE) else LOAD_ERROR_MESSAGE,
    }
    return templates.TemplateResponse(request, "student_view.html", context, status_code=status_code)
