from typing import List, Optional, Tuple

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from skirent.admin.schemas.lessons import AdminLessonUpdate
from skirent.core.database import db_operation
from skirent.core.exceptions import ValidationError
from skirent.core.logging_utils import log_business_event
from skirent.public.crud.lessons import get_lesson_with_teacher
from skirent.rental.models import Lesson, ReservationStatus, Teacher
from skirent.rental.services.pricing import validate_status_transition


@db_operation
async def get_lessons_paginated(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 20,
    status: Optional[ReservationStatus] = None,
    teacher_id: Optional[int] = None,
) -> Tuple[List[Lesson], int]:
    """status=None returns lessons of every status"""
    query = select(Lesson).options(selectinload(Lesson.teacher))
    count_query = select(func.count(Lesson.id))

    if status is not None:
        query = query.where(Lesson.status == status)
        count_query = count_query.where(Lesson.status == status)
    if teacher_id is not None:
        query = query.where(Lesson.teacher_id == teacher_id)
        count_query = count_query.where(Lesson.teacher_id == teacher_id)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(Lesson.created_at.desc(), Lesson.id.desc()).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total


@db_operation
async def update_lesson(
    db: AsyncSession, lesson_id: int, lesson_update: AdminLessonUpdate
) -> Lesson:
    """Status change and teacher assignment; teacher_id=None unassigns"""
    lesson = await get_lesson_with_teacher(db, lesson_id)
    fields = lesson_update.model_dump(exclude_unset=True)

    if not fields:
        raise ValidationError("No fields to update")

    old_status = lesson.status
    new_status = fields.get("status")
    status_changed = new_status is not None and validate_status_transition(
        "lesson", lesson.status, new_status
    )

    if "teacher_id" in fields:
        teacher_id = fields["teacher_id"]
        if teacher_id is None:
            lesson.teacher_id = None
            lesson.teacher = None
        else:
            teacher = await db.get(Teacher, teacher_id)
            if teacher is None:
                raise ValidationError("Invalid teacher", {"teacher_id": teacher_id})
            lesson.teacher_id = teacher.id
            lesson.teacher = teacher

    if status_changed:
        lesson.status = new_status

    await db.commit()

    if status_changed:
        log_business_event(
            "lesson_status_changed",
            "lesson",
            lesson.id,
            {"from": old_status.value, "to": lesson.status.value},
        )
    if "teacher_id" in fields:
        log_business_event(
            "lesson_teacher_assigned", "lesson", lesson.id, {"teacher_id": lesson.teacher_id}
        )

    return await get_lesson_with_teacher(db, lesson.id)


@db_operation
async def delete_lesson(db: AsyncSession, lesson_id: int) -> None:
    lesson = await get_lesson_with_teacher(db, lesson_id)
    await db.execute(delete(Lesson).where(Lesson.id == lesson.id))
    await db.commit()

    log_business_event("lesson_deleted", "lesson", lesson_id)
