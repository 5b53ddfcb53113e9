import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict

from skirent.rental.labels import lesson_description
from skirent.rental.models import LessonLevel, LessonType, ReservationStatus


class TeacherBrief(BaseModel):
    id: int
    firstname: str
    lastname: str

    model_config = ConfigDict(from_attributes=True)


class AdminLessonRead(BaseModel):
    id: int
    first_name: str
    last_name: str
    customer: str
    email: str
    phone_number: str
    personal_id: str
    participants: List[str] = Field(default_factory=list)
    number_of_people: int
    duration: int
    level: LessonLevel
    lesson_type: LessonType
    language: str
    date: datetime.date
    start_time: str
    description: str = ""
    teacher_id: Optional[int] = None
    teacher: Optional[TeacherBrief] = None
    status: ReservationStatus
    total_price: float
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_lesson(cls, lesson) -> "AdminLessonRead":
        """Lesson must have teacher loaded"""
        item = cls.model_validate(lesson)
        item.description = lesson_description(lesson)
        return item


class AdminLessonUpdate(BaseModel):
    """
    ``teacher_id`` sent as null unassigns the teacher; omitted leaves it as is.
    """
    status: Optional[ReservationStatus] = None
    teacher_id: Optional[int] = Field(None, gt=0)


class AdminLessonListResponse(BaseModel):
    items: List[AdminLessonRead]
    total: int
    page: int
    size: int
    pages: int
