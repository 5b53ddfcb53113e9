import datetime
from typing import List
from pydantic import BaseModel, Field, field_validator, model_validator

from skirent.public.schemas.bookings import ContactFields
from skirent.rental.models import LessonLevel, LessonType, ReservationStatus


class LessonCreate(ContactFields):
    """Lesson reservation; people/duration/start time are checked against pricing rules"""
    number_of_people: int
    duration: int
    level: LessonLevel
    lesson_type: LessonType
    language: str = Field(..., min_length=1, max_length=50)
    date: datetime.date
    start_time: str = Field(..., max_length=5)
    personal_id: str = Field(..., min_length=1, max_length=50)
    participants: List[str] = Field(default_factory=list)

    @field_validator("personal_id", "language")
    @classmethod
    def strip_required(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be empty")
        return v

    @field_validator("participants")
    @classmethod
    def clean_participants(cls, v):
        return [name.strip() for name in v if name and name.strip()]

    @model_validator(mode="after")
    def participants_fit_group(self):
        if len(self.participants) > self.number_of_people:
            raise ValueError("Too many participants for the selected number of people")
        return self


class LessonSummary(BaseModel):
    id: int
    customer: str
    description: str
    date: datetime.date
    start_time: str
    language: str
    total_price: float
    status: ReservationStatus


class LessonCreatedResponse(BaseModel):
    id: int
    message: str
    lesson: LessonSummary
