# /teacherboard/models/session_model.py

# --- Core Imports ---
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional


class SessionSettings(BaseModel):
    """Which content kinds the student page may show."""
    allowNotices: bool = True
    allowLinks: bool = True
    allowClassContent: bool = True
    allowBookContent: bool = True


class SessionCreate(BaseModel):
    className: str = Field(..., min_length=1, max_length=50, description="Shown as the student page heading.")

    @field_validator("className")
    @classmethod
    def strip_class_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Class name must not be blank.")
        return value


class SettingsPatch(BaseModel):
    """Partial update; only the flags that are sent are changed."""
    allowNotices: Optional[bool] = None
    allowLinks: Optional[bool] = None
    allowClassContent: Optional[bool] = None
    allowBookContent: Optional[bool] = None


class ActiveToggle(BaseModel):
    isActive: bool


class Session(BaseModel):
    """The teacher's view of their current session."""
    model_config = ConfigDict(from_attributes=True)

    sessionCode: str
    teacherId: str
    teacherName: str
    className: str
    isActive: bool
    createdAt: Optional[str] = None
    lastUpdated: Optional[str] = None
    settings: SessionSettings = Field(default_factory=SessionSettings)
    publicUrl: Optional[str] = None


class RegenerateResponse(BaseModel):
    sessionCode: str
    publicUrl: Optional[str] = None


class ReconcileResponse(BaseModel):
    repaired: bool


class PublicSession(BaseModel):
    """What a student may learn about a session. Never carries the teacher id."""
    sessionCode: str
    className: str
    teacherName: str
    settings: SessionSettings
