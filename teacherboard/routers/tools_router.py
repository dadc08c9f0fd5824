# /teacherboard/routers/tools_router.py

"""AI and document tools. Gemini errors come back with the status their cause implies."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse

from ..core.deps import get_current_teacher
from ..core.exceptions import AIServiceError, InappropriateContentError
from ..models import tool_model
from ..models.auth_model import TeacherAccount
from ..services import tool_service
from ..services.tool_helpers.text_utils import markdown_to_plain_text

logger = logging.getLogger(__name__)

router = APIRouter()


def _ai_error(e: AIServiceError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/gemini", response_model=tool_model.TextGenerationResponse, summary="Generate Text with Gemini")
async def generate_text(request: tool_model.TextGenerationRequest, current_teacher: TeacherAccount = Depends(get_current_teacher)):
    try:
        return await tool_service.generate_text(request)
    except AIServiceError as e:
        raise _ai_error(e)


@router.post("/gemini/vision", response_model=tool_model.VisionResponse, summary="Ask Gemini about an Image")
async def describe_image(request: tool_model.VisionRequest, current_teacher: TeacherAccount = Depends(get_current_teacher)):
    try:
        return await tool_service.describe_image(request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except AIServiceError as e:
        raise _ai_error(e)


@router.post("/gemini/vision/upload", response_model=tool_model.VisionResponse, summary="Ask Gemini about an Uploaded Image")
async def describe_uploaded_image(
    image: UploadFile = File(...),
    prompt: Optional[str] = Form(default=None),
    model: Optional[str] = Form(default=None),
    apiKey: Optional[str] = Form(default=None),
    current_teacher: TeacherAccount = Depends(get_current_teacher),
):
    try:
        return await tool_service.describe_image_bytes(await image.read(), prompt, model, apiKey)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except AIServiceError as e:
        raise _ai_error(e)


@router.post("/gemini/image", response_model=tool_model.ImagePromptResponse, summary="Prepare a Classroom Image")
async def generate_image(request: tool_model.ImagePromptRequest, current_teacher: TeacherAccount = Depends(get_current_teacher)):
    try:
        return await tool_service.generate_image_prompt(request)
    except InappropriateContentError as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"detail": str(e), "suggestion": tool_service.INAPPROPRIATE_SUGGESTION},
        )


@router.post("/official-document", response_model=tool_model.DocumentResponse, summary="Fill in an Official Document Template")
def generate_official_document(request: tool_model.OfficialDocumentRequest, current_teacher: TeacherAccount = Depends(get_current_teacher)):
    try:
        return tool_service.generate_official_document(request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.post("/ai-document", response_model=tool_model.DocumentResponse, summary="Draft an Official Document with Gemini")
async def generate_ai_document(request: tool_model.AIDocumentRequest, current_teacher: TeacherAccount = Depends(get_current_teacher)):
    try:
        return await tool_service.generate_ai_document(request)
    except AIServiceError as e:
        raise _ai_error(e)


@router.post("/plain-text", response_model=tool_model.PlainTextResponse, summary="Convert Markdown to Plain Text")
def convert_markdown(request: tool_model.MarkdownRequest, current_teacher: TeacherAccount = Depends(get_current_teacher)):
    return {"plainText": markdown_to_plain_text(request.markdown)}
