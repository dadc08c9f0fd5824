# /teacherboard/models/schedule_model.py

from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import List, Optional
from enum import Enum
from datetime import date


class EventCategory(str, Enum):
    HOLIDAY = "holiday"
    SCHOOL_EVENT = "school-event"
    PERSONAL = "personal"
    MEETING = "meeting"
    CONSULTATION = "consultation"


class Repetition(str, Enum):
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class CalendarView(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(default="", max_length=1000)
    startDate: date
    endDate: Optional[date] = None
    startTime: Optional[str] = Field(default="", max_length=5)
    endTime: Optional[str] = Field(default="", max_length=5)
    category: EventCategory = EventCategory.PERSONAL
    isAllDay: bool = True
    isImportant: bool = False
    location: Optional[str] = Field(default="", max_length=100)
    repetition: Repetition = Repetition.NONE

    @model_validator(mode="after")
    def end_not_before_start(self):
        if self.endDate is not None and self.endDate < self.startDate:
            raise ValueError("endDate must not be before startDate.")
        return self


class Event(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str = ""
    startDate: date
    endDate: date
    startTime: Optional[str] = ""
    endTime: Optional[str] = ""
    category: EventCategory = EventCategory.PERSONAL
    isAllDay: bool = True
    isImportant: bool = False
    location: Optional[str] = ""
    repetition: Repetition = Repetition.NONE
    userId: Optional[str] = None
    createdAt: Optional[str] = None


class DDay(BaseModel):
    id: str
    title: str
    startDate: date
    days: int
    label: str


class CalendarDay(BaseModel):
    date: date
    inMonth: bool
    events: List[Event] = []


class CalendarGrid(BaseModel):
    year: int
    month: int
    weeks: List[List[CalendarDay]]
