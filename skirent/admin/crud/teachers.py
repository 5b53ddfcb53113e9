from typing import List

from sqlalchemy import delete, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from skirent.admin.schemas.teachers import AdminTeacherRead, TeacherCreate, TeacherUpdate
from skirent.core.database import db_operation
from skirent.core.exceptions import NotFoundError, ValidationError
from skirent.core.logging_utils import log_business_event
from skirent.rental.models import Lesson, Teacher


def _with_lessons_count():
    lessons_count = func.count(Lesson.id).label("lessons_count")
    return (
        select(Teacher, lessons_count)
        .outerjoin(Lesson, Lesson.teacher_id == Teacher.id)
        .group_by(Teacher.id)
    )


def _to_read(teacher: Teacher, lessons_count: int) -> AdminTeacherRead:
    item = AdminTeacherRead.model_validate(teacher)
    item.lessons_count = lessons_count or 0
    return item


@db_operation
async def get_teachers_with_stats(db: AsyncSession) -> List[AdminTeacherRead]:
    result = await db.execute(
        _with_lessons_count().order_by(Teacher.firstname, Teacher.lastname)
    )
    return [_to_read(teacher, count) for teacher, count in result.all()]


@db_operation
async def get_teacher(db: AsyncSession, teacher_id: int) -> AdminTeacherRead:
    result = await db.execute(
        _with_lessons_count()
        .where(Teacher.id == teacher_id)
        .execution_options(populate_existing=True)
    )
    row = result.first()

    if not row:
        raise NotFoundError("Teacher", str(teacher_id))

    return _to_read(row[0], row[1])


@db_operation
async def create_teacher(db: AsyncSession, teacher_data: TeacherCreate) -> AdminTeacherRead:
    teacher = Teacher(firstname=teacher_data.firstname, lastname=teacher_data.lastname)
    db.add(teacher)
    await db.commit()

    log_business_event("teacher_created", "teacher", teacher.id)
    return await get_teacher(db, teacher.id)


@db_operation
async def update_teacher(
    db: AsyncSession, teacher_id: int, teacher_update: TeacherUpdate
) -> AdminTeacherRead:
    fields = {
        k: v for k, v in teacher_update.model_dump(exclude_unset=True).items() if v is not None
    }
    if not fields:
        raise ValidationError("No fields to update")

    teacher = await db.get(Teacher, teacher_id)
    if teacher is None:
        raise NotFoundError("Teacher", str(teacher_id))

    for field, value in fields.items():
        setattr(teacher, field, value)
    await db.commit()

    log_business_event("teacher_updated", "teacher", teacher_id, {"fields": sorted(fields)})
    return await get_teacher(db, teacher_id)


@db_operation
async def delete_teacher(db: AsyncSession, teacher_id: int) -> None:
    """Lessons of the teacher stay, unassigned"""
    result = await db.execute(select(Teacher.id).where(Teacher.id == teacher_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Teacher", str(teacher_id))

    await db.execute(
        update(Lesson).where(Lesson.teacher_id == teacher_id).values(teacher_id=None)
    )
    await db.execute(delete(Teacher).where(Teacher.id == teacher_id))
    await db.commit()

    log_business_event("teacher_deleted", "teacher", teacher_id)
