# /teacherboard/models/classroom_tool_model.py

from pydantic import BaseModel, Field
from typing import List


class PickRequest(BaseModel):
    totalStudents: int = Field(..., ge=1, le=100)
    count: int = Field(default=1, ge=1)
    alreadyPicked: List[int] = []


class PickResponse(BaseModel):
    picked: List[int]
    remaining: int


class GroupRequest(BaseModel):
    totalStudents: int = Field(..., ge=1, le=100)
    groupCount: int = Field(..., ge=1, le=50)
    missingNumbers: str = Field(default="", description="Comma-separated numbers of absent students.")


class GroupResponse(BaseModel):
    groups: List[List[int]]
    excluded: List[int]
