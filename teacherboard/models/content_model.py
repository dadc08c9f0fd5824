# /teacherboard/models/content_model.py

"""
Request and response models for the workspace content kinds.

Create models enforce field presence and the maximum lengths the teacher
forms allow; update models make every field optional for partial patches.
"""

# --- Core Imports ---
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from enum import Enum


# --- Enumerations ---

class NoticePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class NoticeCategory(str, Enum):
    GENERAL = "general"
    HOMEWORK = "homework"
    EVENT = "event"
    ANNOUNCEMENT = "announcement"


class BookCategory(str, Enum):
    READING = "reading"
    TEXTBOOK = "textbook"
    REFERENCE = "reference"
    ACTIVITY = "activity"


class ContentBase(BaseModel):
    """Fields every stored content item carries."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    isActive: bool = True
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class ActiveToggle(BaseModel):
    isActive: bool


# --- Notices ---

class NoticeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1, max_length=1000)
    priority: NoticePriority = NoticePriority.MEDIUM
    category: NoticeCategory = NoticeCategory.GENERAL
    isActive: bool = True


class NoticeUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    content: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    priority: Optional[NoticePriority] = None
    category: Optional[NoticeCategory] = None
    isActive: Optional[bool] = None


class Notice(ContentBase):
    title: str
    content: str
    priority: NoticePriority = NoticePriority.MEDIUM
    category: NoticeCategory = NoticeCategory.GENERAL


# --- Saved links ---

class LinkCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    url: str = Field(..., min_length=1)
    description: Optional[str] = Field(default="", max_length=300)
    category: str = Field(default="기타", max_length=30)
    isQuickLink: bool = False
    isActive: bool = True


class LinkUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    url: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, max_length=300)
    category: Optional[str] = Field(default=None, max_length=30)
    isQuickLink: Optional[bool] = None
    isActive: Optional[bool] = None


class SavedLink(ContentBase):
    title: str
    url: str
    description: Optional[str] = ""
    category: str = "기타"
    addedDate: Optional[str] = None
    isQuickLink: bool = False


# --- Book contents ---

class BookContentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    author: Optional[str] = Field(default="", max_length=50)
    content: str = Field(..., min_length=1, max_length=2000)
    pageRange: Optional[str] = Field(default="", max_length=20)
    category: BookCategory = BookCategory.READING
    subject: Optional[str] = Field(default="", max_length=30)
    isActive: bool = True


class BookContentUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    author: Optional[str] = Field(default=None, max_length=50)
    content: Optional[str] = Field(default=None, min_length=1, max_length=2000)
    pageRange: Optional[str] = Field(default=None, max_length=20)
    category: Optional[BookCategory] = None
    subject: Optional[str] = Field(default=None, max_length=30)
    isActive: Optional[bool] = None


class BookContent(ContentBase):
    title: str
    author: Optional[str] = ""
    content: str
    pageRange: Optional[str] = ""
    category: BookCategory = BookCategory.READING
    subject: Optional[str] = ""


# --- Chalkboard (private history and class-shared) ---

class ChalkboardNoteCreate(BaseModel):
    contentHtml: str = ""
    contentText: str = ""
    customTitle: Optional[str] = Field(default=None, max_length=100)


class ClassContentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    contentHtml: str = ""
    contentText: str = Field(..., min_length=1)
    isActive: bool = True


class ClassContentUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    contentHtml: Optional[str] = None
    contentText: Optional[str] = Field(default=None, min_length=1)
    isActive: Optional[bool] = None


class ChalkboardNote(ContentBase):
    title: str
    contentHtml: str = ""
    contentText: str = ""


class ClassContent(ChalkboardNote):
    type: str = "chalkboard"


class QuickLinkCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    url: str = Field(..., min_length=1)
    description: Optional[str] = Field(default="", max_length=300)
    category: str = Field(default="기타", max_length=30)


class SeedResult(BaseModel):
    added: int
