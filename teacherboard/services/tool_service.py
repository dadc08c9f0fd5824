# /teacherboard/services/tool_service.py

"""
Business logic for the teacher's AI and document tools.

Gemini-backed handlers are async and raise `AIServiceError` subclasses; the
template-based official document generator is plain synchronous code and
raises ValueError for bad input.
"""

import base64
import binascii
import io
import logging
from datetime import date
from typing import Dict, Optional

from PIL import Image, UnidentifiedImageError

from ..config import get_settings
from ..core.exceptions import AIServiceError, InappropriateContentError
from ..models import tool_model
from . import gemini_service, prompt_library
from .tool_helpers.official_document import build_official_document, format_korean_date
from .tool_helpers.text_utils import markdown_to_plain_text

logger = logging.getLogger(__name__)

INAPPROPRIATE_KEYWORDS = ["폭력", "성인", "정치", "종교 갈등", "차별", "혐오"]
INAPPROPRIATE_SUGGESTION = "예: 과학 실험, 역사적 인물, 지리적 특징 등"

# Stable placeholder photos grouped by theme: nature, tools, buildings, abstract.
PLACEHOLDER_IMAGE_IDS = [
    *range(200, 210),
    *range(300, 310),
    *range(400, 410),
    *range(500, 510),
]


def _model_name(model_id: Optional[str]) -> str:
    return model_id or get_settings().default_gemini_model


# --- Gemini passthrough ---

async def generate_text(request: tool_model.TextGenerationRequest) -> Dict:
    text = await gemini_service.generate_text(request.prompt, model_id=request.model, api_key=request.apiKey)
    return {"success": True, "response": text, "model": _model_name(request.model)}


def decode_data_url(data_url: str) -> Image.Image:
    """Decodes a `data:<mime>;base64,<payload>` URL into a Pillow image."""
    header, _, payload = data_url.partition(",")
    if not payload or not header.startswith("data:") or ";base64" not in header:
        raise ValueError("Image must be a base64 data URL.")
    try:
        image = Image.open(io.BytesIO(base64.b64decode(payload, validate=True)))
        image.load()
    except (binascii.Error, UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Could not decode the uploaded image: {e}") from e
    return image


async def describe_image(request: tool_model.VisionRequest) -> Dict:
    image = decode_data_url(request.image)
    prompt = request.prompt or prompt_library.VISION_DEFAULT_PROMPT
    text = await gemini_service.generate_multimodal_response(prompt, [image], model_id=request.model, api_key=request.apiKey)
    return {"response": text}


async def describe_image_bytes(file_bytes: bytes, prompt: Optional[str], model_id: Optional[str], api_key: Optional[str]) -> Dict:
    try:
        image = Image.open(io.BytesIO(file_bytes))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Could not decode the uploaded image: {e}") from e
    text = await gemini_service.generate_multimodal_response(
        prompt or prompt_library.VISION_DEFAULT_PROMPT, [image], model_id=model_id, api_key=api_key
    )
    return {"response": text}


# --- Image prompt ---

def check_classroom_appropriate(prompt: str) -> None:
    lowered = prompt.lower()
    if any(keyword in lowered for keyword in INAPPROPRIATE_KEYWORDS):
        raise InappropriateContentError("교육용으로 적합하지 않은 내용입니다. 다른 주제를 시도해보세요.")


def placeholder_image_url(prompt: str, cache_buster: Optional[int] = None) -> str:
    image_id = PLACEHOLDER_IMAGE_IDS[sum(ord(ch) for ch in prompt) % len(PLACEHOLDER_IMAGE_IDS)]
    url = f"https://picsum.photos/id/{image_id}/500/400"
    return f"{url}?t={cache_buster}" if cache_buster is not None else url


async def generate_image_prompt(request: tool_model.ImagePromptRequest, cache_buster: Optional[int] = None) -> Dict:
    """
    Screens the description, asks Gemini for an English image prompt and
    returns a placeholder image for it. A failed enhancement falls back to the
    teacher's own wording.
    """
    check_classroom_appropriate(request.prompt)

    enhanced = request.prompt
    try:
        result = await gemini_service.generate_json(
            prompt_library.IMAGE_PROMPT_ENHANCEMENT_PROMPT.format(prompt=request.prompt),
            model_id=request.model,
            api_key=request.apiKey,
        )
        candidate = result.get("enhancedPrompt") if isinstance(result, dict) else None
        if isinstance(candidate, str) and candidate.strip():
            enhanced = candidate.strip()
    except (ValueError, AIServiceError) as e:
        logger.warning("Image prompt enhancement failed, using the original prompt: %s", e)

    return {
        "success": True,
        "imageUrl": placeholder_image_url(enhanced, cache_buster),
        "originalPrompt": request.prompt,
        "enhancedPrompt": enhanced,
        "style": "교육용 스타일",
        "model": _model_name(request.model),
    }


# --- Documents ---

def _document_file_name(title: str, today: date) -> str:
    return f"{title.strip() or '공문서'}_{today.isoformat()}.txt"


def generate_official_document(request: tool_model.OfficialDocumentRequest, today: Optional[date] = None) -> Dict:
    today = today or date.today()
    document = build_official_document(
        doc_type=request.docType.value,
        title=request.title,
        recipient=request.recipient,
        main_content=request.mainContent,
        sender=request.sender,
        department=request.senderPosition,
        purpose=request.purpose,
        deadline=request.deadline,
        attachment=request.attachment,
        today=today,
    )
    return {"document": document, "plainText": document, "fileName": _document_file_name(request.title, today)}


async def generate_ai_document(request: tool_model.AIDocumentRequest, today: Optional[date] = None) -> Dict:
    today = today or date.today()
    prompt = prompt_library.OFFICIAL_DOCUMENT_PROMPT.format(
        title=request.title,
        recipient=request.recipient,
        sender=request.sender or "(작성자)",
        content=request.content,
        deadline_line=f"- 기한: {request.deadline}" if request.deadline else "",
        attachments_line=f"- 첨부: {request.attachments}" if request.attachments else "",
        today=format_korean_date(today),
    )
    markdown = await gemini_service.generate_text(prompt, model_id=request.model, api_key=request.apiKey, temperature=0.4)
    return {
        "document": markdown,
        "plainText": markdown_to_plain_text(markdown),
        "fileName": _document_file_name(request.title, today),
    }
