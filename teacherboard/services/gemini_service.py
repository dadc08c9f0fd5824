# /teacherboard/services/gemini_service.py

"""
Thin async wrapper around the Gemini API.

Teachers bring their own API key and choose a model per request; the server's
`GOOGLE_API_KEY` is only the fallback. The `google.generativeai` client keeps
its key in module-global configuration, so every call configures the key and
runs its request while holding `_configure_lock`.
"""

import asyncio
import json
import logging
from typing import Dict, List, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from google.generativeai.types import GenerationConfig
from PIL import Image

from ..config import get_settings
from ..core.exceptions import (
    AIServiceError,
    InvalidAPIKeyError,
    ModelUnavailableError,
    QuotaExceededError,
)
from .tool_helpers.text_utils import repair_json_text

logger = logging.getLogger(__name__)

_configure_lock = asyncio.Lock()


def _resolve_key(api_key: Optional[str]) -> str:
    key = (api_key or "").strip() or get_settings().google_api_key
    if not key:
        raise InvalidAPIKeyError("API Key가 설정되지 않았습니다.")
    return key


def _translate_error(error: Exception) -> AIServiceError:
    """Maps a Gemini client error onto the application's AI error types."""
    message = str(error)
    if isinstance(error, AIServiceError):
        return error
    if "API_KEY_INVALID" in message or "API key" in message or isinstance(
        error, (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied)
    ):
        return InvalidAPIKeyError("API Key가 유효하지 않습니다. 설정에서 올바른 API Key를 입력해주세요.")
    if isinstance(error, (google_exceptions.ResourceExhausted, google_exceptions.TooManyRequests)) or any(
        marker in message for marker in ("QUOTA_EXCEEDED", "RATE_LIMIT_EXCEEDED")
    ):
        return QuotaExceededError("API 사용량 한도에 도달했습니다. 잠시 후 다시 시도해주세요.")
    if isinstance(error, google_exceptions.NotFound) or "model" in message.lower():
        return ModelUnavailableError("선택된 모델을 사용할 수 없습니다. 다른 모델을 선택해보세요.")
    return AIServiceError("AI 서비스에서 오류가 발생했습니다. 잠시 후 다시 시도해주세요.")


async def _generate(contents, model_id: Optional[str], api_key: Optional[str], config: Optional[GenerationConfig] = None) -> str:
    key = _resolve_key(api_key)
    model_name = model_id or get_settings().default_gemini_model
    try:
        async with _configure_lock:
            genai.configure(api_key=key)
            model = genai.GenerativeModel(model_name)
            response = await model.generate_content_async(contents, generation_config=config)
        if not response.parts:
            raise ValueError("AI returned an empty response.")
        return response.text
    except Exception as e:
        logger.error("Gemini request failed (model=%s): %s", model_name, e)
        raise _translate_error(e) from e


# --- CORE GENERATIVE FUNCTIONS ---

async def generate_text(prompt: str, model_id: Optional[str] = None, api_key: Optional[str] = None, temperature: float = 0.7) -> str:
    """The workhorse for text-only, non-streaming tasks."""
    return await _generate(prompt, model_id, api_key, GenerationConfig(temperature=temperature))


async def generate_multimodal_response(prompt: str, images: List[Image.Image], model_id: Optional[str] = None, api_key: Optional[str] = None) -> str:
    """Answers a prompt about one or more Pillow images."""
    return await _generate([prompt, *images], model_id, api_key)


async def generate_json(prompt: str, model_id: Optional[str] = None, api_key: Optional[str] = None, temperature: float = 0.1) -> Dict:
    """
    Asks for a JSON object using the API's JSON mode and parses it leniently,
    since models still wrap JSON in fences or leave trailing commas.
    """
    config = GenerationConfig(temperature=temperature, response_mime_type="application/json")
    raw = await _generate(prompt, model_id, api_key, config)
    return json.loads(repair_json_text(raw))
