# /teacherboard/models/tool_model.py

# --- Core Imports ---
from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class DocType(str, Enum):
    OFFICIAL = "공문"
    REPORT = "보고서"
    PLAN = "계획서"
    REQUEST = "요청서"
    NOTICE = "안내문"
    COOPERATION = "협조요청"


# --- Gemini passthrough ---

class GeminiOptions(BaseModel):
    """Per-request model choice and key. Both fall back to server settings."""
    apiKey: Optional[str] = Field(default=None, description="The teacher's own Gemini API key.")
    model: Optional[str] = Field(default=None, description="Gemini model id, e.g. gemini-2.0-flash-exp.")


class TextGenerationRequest(GeminiOptions):
    prompt: str = Field(..., min_length=1)


class TextGenerationResponse(BaseModel):
    success: bool = True
    response: str
    model: str


class VisionRequest(GeminiOptions):
    image: str = Field(..., min_length=1, description="A base64 data URL, e.g. data:image/png;base64,....")
    prompt: Optional[str] = None


class VisionResponse(BaseModel):
    response: str


class ImagePromptRequest(GeminiOptions):
    prompt: str = Field(..., min_length=1)


class ImagePromptResponse(BaseModel):
    success: bool = True
    imageUrl: str
    originalPrompt: str
    enhancedPrompt: str
    style: str = "교육용 스타일"
    model: str


# --- Documents ---

class OfficialDocumentRequest(BaseModel):
    docType: DocType = DocType.OFFICIAL
    title: str = Field(..., min_length=1, max_length=200)
    recipient: str = Field(..., min_length=1, max_length=100)
    mainContent: str = Field(..., min_length=1, max_length=5000)
    sender: Optional[str] = Field(default=None, max_length=100)
    senderPosition: Optional[str] = Field(default=None, max_length=50)
    purpose: Optional[str] = Field(default=None, max_length=500)
    deadline: Optional[str] = Field(default=None, max_length=100)
    attachment: Optional[str] = Field(default=None, max_length=200)


class AIDocumentRequest(GeminiOptions):
    title: str = Field(..., min_length=1, max_length=200)
    recipient: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1, max_length=5000)
    sender: Optional[str] = Field(default=None, max_length=100)
    deadline: Optional[str] = Field(default=None, max_length=100)
    attachments: Optional[str] = Field(default=None, max_length=200)


class DocumentResponse(BaseModel):
    document: str
    plainText: str
    fileName: str


class MarkdownRequest(BaseModel):
    markdown: str


class PlainTextResponse(BaseModel):
    plainText: str
