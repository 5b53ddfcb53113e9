import math
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from skirent.admin.crud.lessons import delete_lesson, get_lessons_paginated, update_lesson
from skirent.admin.schemas.lessons import (
    AdminLessonListResponse,
    AdminLessonRead,
    AdminLessonUpdate,
)
from skirent.auth.core.dependencies import require_admin
from skirent.core.database import get_session
from skirent.core.exceptions import ValidationError
from skirent.core.limits import limiter
from skirent.public.crud.lessons import get_lesson_with_teacher
from skirent.rental.models import ReservationStatus

router = APIRouter(
    prefix="/admin/lessons",
    tags=["Admin Lessons"],
    dependencies=[Depends(require_admin)],
)


def parse_status_filter(value: Optional[str]) -> Optional[ReservationStatus]:
    """'all' or empty means no filter"""
    if not value or value.lower() == "all":
        return None
    try:
        return ReservationStatus(value.upper())
    except ValueError:
        raise ValidationError(
            f"Invalid status '{value}'",
            {"allowed": ["all"] + [s.value for s in ReservationStatus]},
        )


@router.get("", response_model=AdminLessonListResponse)
@limiter.limit("60/minute")
async def list_lessons(
    request: Request,
    status: Optional[str] = Query(None, description="PENDING, CONFIRMED, CANCELLED, COMPLETED or all"),
    teacher_id: Optional[int] = Query(None, gt=0, description="Filter by teacher"),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
):
    lessons, total = await get_lessons_paginated(
        db,
        skip=(page - 1) * size,
        limit=size,
        status=parse_status_filter(status),
        teacher_id=teacher_id,
    )
    return AdminLessonListResponse(
        items=[AdminLessonRead.from_lesson(lesson) for lesson in lessons],
        total=total,
        page=page,
        size=size,
        pages=math.ceil(total / size) if total > 0 else 1,
    )


@router.get("/{lesson_id}", response_model=AdminLessonRead)
@limiter.limit("60/minute")
async def get_lesson(
    request: Request,
    lesson_id: int = Path(..., description="Lesson ID"),
    db: AsyncSession = Depends(get_session),
):
    lesson = await get_lesson_with_teacher(db, lesson_id)
    return AdminLessonRead.from_lesson(lesson)


@router.patch("/{lesson_id}", response_model=AdminLessonRead)
@limiter.limit("30/minute")
async def patch_lesson(
    request: Request,
    lesson_update: AdminLessonUpdate,
    lesson_id: int = Path(..., description="Lesson ID"),
    db: AsyncSession = Depends(get_session),
):
    """
    Change lesson status or assign a teacher.

    - **teacher_id**: teacher to assign, ``null`` to unassign
    """
    lesson = await update_lesson(db, lesson_id, lesson_update)
    return AdminLessonRead.from_lesson(lesson)


@router.delete("/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("10/minute")
async def remove_lesson(
    request: Request,
    lesson_id: int = Path(..., description="Lesson ID"),
    db: AsyncSession = Depends(get_session),
):
    await delete_lesson(db, lesson_id)
