# /teacherboard/models/prompt_model.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional


class PromptCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1, max_length=5000)
    category: str = Field(default="기타", max_length=30)


class PromptUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    content: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    category: Optional[str] = Field(default=None, max_length=30)


class SavedPrompt(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str
    category: str
    usage: int = 0
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
