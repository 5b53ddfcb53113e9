from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from skirent.core.database import db_operation
from skirent.core.exceptions import NotFoundError, ValidationError
from skirent.core.logging_utils import log_business_event
from skirent.public.crud.catalog import get_pricing_matrix
from skirent.public.schemas.lessons import LessonCreate
from skirent.rental.models import Lesson, ReservationStatus
from skirent.rental.services.pricing import lesson_price, validate_lesson_start


@db_operation
async def get_lesson_with_teacher(db: AsyncSession, lesson_id: int) -> Lesson:
    result = await db.execute(
        select(Lesson)
        .options(selectinload(Lesson.teacher))
        .where(Lesson.id == lesson_id)
        .execution_options(populate_existing=True)
    )
    lesson = result.scalar_one_or_none()

    if not lesson:
        raise NotFoundError("Lesson", str(lesson_id))

    return lesson


@db_operation
async def create_lesson(
    db: AsyncSession, lesson_data: LessonCreate, today: Optional[date] = None
) -> Lesson:
    """Create a PENDING lesson priced from the lesson pricing matrix"""
    if lesson_data.date < (today or date.today()):
        raise ValidationError("Lesson date cannot be in the past")

    validate_lesson_start(lesson_data.start_time)

    matrix = await get_pricing_matrix(db)
    price = lesson_price(matrix, lesson_data.number_of_people, lesson_data.duration)

    lesson = Lesson(
        number_of_people=lesson_data.number_of_people,
        duration=lesson_data.duration,
        level=lesson_data.level,
        lesson_type=lesson_data.lesson_type,
        language=lesson_data.language,
        date=lesson_data.date,
        start_time=lesson_data.start_time,
        first_name=lesson_data.first_name,
        last_name=lesson_data.last_name,
        phone_number=lesson_data.phone_number,
        email=lesson_data.email,
        personal_id=lesson_data.personal_id,
        participants=lesson_data.participants,
        status=ReservationStatus.PENDING,
        total_price=price,
    )

    db.add(lesson)
    await db.commit()

    log_business_event(
        "lesson_created",
        "lesson",
        lesson.id,
        {
            "lesson_type": lesson.lesson_type.value,
            "date": lesson.date.isoformat(),
            "total_price": str(price),
        },
    )

    return await get_lesson_with_teacher(db, lesson.id)
