# /tests/test_tools.py

import base64
import io
import json
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.api_core import exceptions as google_exceptions
from PIL import Image

from teacherboard.core.exceptions import (
    AIServiceError,
    InappropriateContentError,
    InvalidAPIKeyError,
    ModelUnavailableError,
    QuotaExceededError,
)
from teacherboard.models import tool_model
from teacherboard.services import gemini_service, tool_service
from teacherboard.services.tool_helpers import official_document
from teacherboard.services.tool_helpers.text_utils import markdown_to_plain_text, repair_json_text


def png_data_url() -> str:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color="white").save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode()


# --- Text utilities ---

def test_markdown_to_plain_text():
    markdown = "# 제목\n\n**중요** 안내입니다.\n\n* 첫째\n* [링크](https://x.example)\n\n---\n\n`code`"
    assert markdown_to_plain_text(markdown) == "제목\n\n중요 안내입니다.\n\n- 첫째\n- 링크\n\ncode"


def test_repair_json_text_recovers_fenced_output():
    raw = '```json\n{“enhancedPrompt”: “a red apple”,}\n```'
    assert json.loads(repair_json_text(raw)) == {"enhancedPrompt": "a red apple"}


@pytest.mark.parametrize("raw", [None, "no json here", "{ broken", '{"a": }'])
def test_repair_json_text_rejects_garbage(raw):
    with pytest.raises(ValueError):
        repair_json_text(raw)


# --- Official document template ---

def test_official_document_layout():
    document = official_document.build_official_document(
        doc_type="안내문",
        title="현장체험학습 안내",
        recipient="학부모님",
        main_content="일시: 5월 3일\n\n장소: 과학관",
        today=date(2024, 4, 2),
        rand=lambda _a, _b: 42,
    )
    lines = document.splitlines()

    assert lines[0] == "안내문"
    assert "문서번호: 교무부-0042" in lines
    assert "시행일자: 2024.4.2." in lines
    assert "  가. 일시: 5월 3일" in lines
    assert "  나. 장소: 과학관" in lines
    assert "붙임: 없음" in lines
    assert lines[-1] == "담당자: 교무부"


def test_official_document_validates_input():
    with pytest.raises(ValueError):
        official_document.build_official_document("편지", "t", "r", "c")
    with pytest.raises(ValueError):
        official_document.build_official_document("공문", "t", "  ", "c")


def test_generate_official_document_response():
    request = tool_model.OfficialDocumentRequest(title="회의 안내", recipient="교직원", mainContent="회의 일정")
    result = tool_service.generate_official_document(request, today=date(2024, 12, 25))

    assert result["fileName"] == "회의 안내_2024-12-25.txt"
    assert result["document"] == result["plainText"]
    assert result["document"].startswith("공문")


# --- Gemini wrapper ---

@pytest.fixture
def mock_genai(mocker):
    genai = mocker.patch.object(gemini_service, "genai")
    response = MagicMock(parts=["part"], text="생성된 답변")
    model = genai.GenerativeModel.return_value
    model.generate_content_async = AsyncMock(return_value=response)
    return genai


@pytest.mark.asyncio
async def test_generate_text_uses_the_teachers_key_and_model(mock_genai):
    text = await gemini_service.generate_text("안녕", model_id="gemini-1.5-pro", api_key="teacher-key")

    assert text == "생성된 답변"
    mock_genai.configure.assert_called_once_with(api_key="teacher-key")
    mock_genai.GenerativeModel.assert_called_once_with("gemini-1.5-pro")


@pytest.mark.asyncio
async def test_missing_key_is_rejected_before_calling_gemini(mock_genai):
    with pytest.raises(InvalidAPIKeyError):
        await gemini_service.generate_text("안녕", api_key="  ")
    mock_genai.configure.assert_not_called()


@pytest.mark.parametrize(
    "error, expected",
    [
        (google_exceptions.PermissionDenied("API_KEY_INVALID"), InvalidAPIKeyError),
        (google_exceptions.ResourceExhausted("QUOTA_EXCEEDED"), QuotaExceededError),
        (google_exceptions.NotFound("models/unknown is not found"), ModelUnavailableError),
        (RuntimeError("connection reset"), AIServiceError),
    ],
)
@pytest.mark.asyncio
async def test_gemini_errors_are_translated(mock_genai, error, expected):
    mock_genai.GenerativeModel.return_value.generate_content_async = AsyncMock(side_effect=error)

    with pytest.raises(expected) as exc_info:
        await gemini_service.generate_text("안녕", api_key="k")
    assert type(exc_info.value) is expected


@pytest.mark.asyncio
async def test_empty_response_is_a_service_error(mock_genai):
    mock_genai.GenerativeModel.return_value.generate_content_async = AsyncMock(return_value=MagicMock(parts=[]))

    with pytest.raises(AIServiceError) as exc_info:
        await gemini_service.generate_text("안녕", api_key="k")
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_generate_json_parses_lenient_output(mock_genai):
    mock_genai.GenerativeModel.return_value.generate_content_async = AsyncMock(
        return_value=MagicMock(parts=["p"], text='```json\n{"enhancedPrompt": "volcano diagram",}\n```')
    )
    assert await gemini_service.generate_json("x", api_key="k") == {"enhancedPrompt": "volcano diagram"}


# --- Tool service ---

def test_decode_data_url():
    assert tool_service.decode_data_url(png_data_url()).size == (4, 4)
    with pytest.raises(ValueError):
        tool_service.decode_data_url("not-a-data-url")
    with pytest.raises(ValueError):
        tool_service.decode_data_url("data:image/png;base64,AAAA")


@pytest.mark.asyncio
async def test_describe_image_sends_the_decoded_image(mocker):
    generate = mocker.patch.object(
        tool_service.gemini_service, "generate_multimodal_response", AsyncMock(return_value="흰 사각형")
    )
    request = tool_model.VisionRequest(image=png_data_url(), apiKey="k")

    assert await tool_service.describe_image(request) == {"response": "흰 사각형"}
    prompt, images = generate.call_args.args
    assert prompt == tool_service.prompt_library.VISION_DEFAULT_PROMPT
    assert isinstance(images[0], Image.Image)


def test_placeholder_image_is_stable_per_prompt():
    url = tool_service.placeholder_image_url("a red apple")
    assert url == tool_service.placeholder_image_url("a red apple")
    image_id = int(url.split("/id/")[1].split("/")[0])
    assert image_id in tool_service.PLACEHOLDER_IMAGE_IDS
    assert tool_service.placeholder_image_url("a red apple", cache_buster=7).endswith("?t=7")


@pytest.mark.asyncio
async def test_inappropriate_image_prompt_is_refused(mocker):
    generate_json = mocker.patch.object(tool_service.gemini_service, "generate_json", AsyncMock())

    with pytest.raises(InappropriateContentError):
        await tool_service.generate_image_prompt(tool_model.ImagePromptRequest(prompt="폭력적인 장면"))
    generate_json.assert_not_called()


@pytest.mark.asyncio
async def test_image_prompt_uses_the_enhanced_prompt(mocker):
    mocker.patch.object(
        tool_service.gemini_service, "generate_json", AsyncMock(return_value={"enhancedPrompt": "a volcano cross-section"})
    )
    result = await tool_service.generate_image_prompt(tool_model.ImagePromptRequest(prompt="화산 단면도", apiKey="k"))

    assert result["enhancedPrompt"] == "a volcano cross-section"
    assert result["originalPrompt"] == "화산 단면도"
    assert result["imageUrl"] == tool_service.placeholder_image_url("a volcano cross-section")


@pytest.mark.asyncio
async def test_image_prompt_falls_back_to_the_original(mocker):
    mocker.patch.object(tool_service.gemini_service, "generate_json", AsyncMock(side_effect=QuotaExceededError("quota")))

    result = await tool_service.generate_image_prompt(tool_model.ImagePromptRequest(prompt="화산 단면도"))

    assert result["enhancedPrompt"] == "화산 단면도"


@pytest.mark.asyncio
async def test_ai_document_returns_markdown_and_plain_text(mocker):
    generate = mocker.patch.object(tool_service.gemini_service, "generate_text", AsyncMock(return_value="# 공문\n\n**본문**"))
    request = tool_model.AIDocumentRequest(title="협조 요청", recipient="각 학교장", content="자료 제출", apiKey="k")

    result = await tool_service.generate_ai_document(request, today=date(2024, 12, 25))

    assert result["document"] == "# 공문\n\n**본문**"
    assert result["plainText"] == "공문\n\n본문"
    assert "2024.12.25." in generate.call_args.args[0]
