from enum import Enum
from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    Numeric,
    DateTime,
    ForeignKey,
    JSON,
    Index,
    Enum as SQLEnum,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from skirent.core.database import Base
from skirent.rental.models.status import ReservationStatus


class LessonType(str, Enum):
    SKI = "SKI"
    SNOWBOARD = "SNOWBOARD"


class LessonLevel(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    EXPERT = "EXPERT"


class Lesson(Base):
    """Ski or snowboard instruction session for 1-4 people"""
    __tablename__ = "lessons"

    id = Column(Integer, primary_key=True)

    number_of_people = Column(Integer, nullable=False)
    duration = Column(Integer, nullable=False)  # hours
    level = Column(SQLEnum(LessonLevel, name="lesson_level"), nullable=False)
    lesson_type = Column(SQLEnum(LessonType, name="lesson_type"), nullable=False)
    language = Column(String(50), nullable=False)

    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)  # HH:MM

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone_number = Column(String(30), nullable=False)
    email = Column(String(255), nullable=False)
    personal_id = Column(String(50), nullable=False)

    # Participant names, optional
    participants = Column(JSON, nullable=False, default=list)

    teacher_id = Column(
        Integer,
        ForeignKey("teachers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    status = Column(
        SQLEnum(ReservationStatus, name="reservation_status"),
        default=ReservationStatus.PENDING,
        nullable=False,
        index=True,
    )
    total_price = Column(Numeric(10, 2), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    teacher = relationship("Teacher", back_populates="lessons")

    __table_args__ = (
        Index("ix_lessons_status_date", "status", "date"),
    )

    @property
    def customer(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Lesson(id={self.id}, date={self.date}, time={self.start_time}, status={self.status})>"
