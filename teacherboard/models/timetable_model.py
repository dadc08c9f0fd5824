# /teacherboard/models/timetable_model.py

from pydantic import BaseModel, Field
from typing import Dict, List, Optional

PERIODS = ["1교시", "2교시", "3교시", "4교시", "5교시", "6교시"]

SUGGESTED_SUBJECTS = [
    "국어", "수학", "사회", "과학", "영어", "음악", "미술", "체육", "실과",
    "도덕", "학교", "사람들", "우리나라", "탐험", "나", "자연", "마을", "세계",
]


class Timetable(BaseModel):
    periods: Dict[str, str] = Field(default_factory=lambda: {p: "" for p in PERIODS})
    updatedAt: Optional[str] = None


class TimetableUpdate(BaseModel):
    periods: Dict[str, str]


class SubjectList(BaseModel):
    periods: List[str] = PERIODS
    subjects: List[str] = SUGGESTED_SUBJECTS
