from typing import List

from fastapi import APIRouter, Depends, Path, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from skirent.admin.crud.teachers import (
    create_teacher,
    delete_teacher,
    get_teachers_with_stats,
    update_teacher,
)
from skirent.admin.schemas.teachers import AdminTeacherRead, TeacherCreate, TeacherUpdate
from skirent.auth.core.dependencies import require_admin
from skirent.core.database import get_session
from skirent.core.limits import limiter

router = APIRouter(
    prefix="/admin/teachers",
    tags=["Admin Teachers"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=List[AdminTeacherRead])
@limiter.limit("60/minute")
async def list_teachers(request: Request, db: AsyncSession = Depends(get_session)):
    return await get_teachers_with_stats(db)


@router.post("", response_model=AdminTeacherRead, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def add_teacher(
    request: Request,
    teacher_data: TeacherCreate,
    db: AsyncSession = Depends(get_session),
):
    return await create_teacher(db, teacher_data)


@router.patch("/{teacher_id}", response_model=AdminTeacherRead)
@limiter.limit("30/minute")
async def patch_teacher(
    request: Request,
    teacher_update: TeacherUpdate,
    teacher_id: int = Path(..., description="Teacher ID"),
    db: AsyncSession = Depends(get_session),
):
    return await update_teacher(db, teacher_id, teacher_update)


@router.delete("/{teacher_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("10/minute")
async def remove_teacher(
    request: Request,
    teacher_id: int = Path(..., description="Teacher ID"),
    db: AsyncSession = Depends(get_session),
):
    """Delete a teacher; their lessons stay unassigned"""
    await delete_teacher(db, teacher_id)
