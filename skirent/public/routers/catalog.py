from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from skirent.core.config import CURRENCY
from skirent.core.database import get_session
from skirent.core.limits import limiter
from skirent.public.crud.catalog import get_price_list, get_pricing_matrix, get_teachers
from skirent.public.schemas.catalog import LessonPricingMatrix, PriceListRead, TeacherRead

router = APIRouter(tags=["Catalog"])


@router.get("/prices", response_model=List[PriceListRead])
@limiter.limit("60/minute")
async def list_prices(request: Request, db: AsyncSession = Depends(get_session)):
    """Rows of the public price table"""
    return await get_price_list(db)


@router.get("/teachers", response_model=List[TeacherRead])
@limiter.limit("60/minute")
async def list_teachers(request: Request, db: AsyncSession = Depends(get_session)):
    return await get_teachers(db)


@router.get("/lessons/pricing", response_model=LessonPricingMatrix)
@limiter.limit("60/minute")
async def lesson_pricing(request: Request, db: AsyncSession = Depends(get_session)):
    """Lesson price per group size and duration, defaults when not configured"""
    return LessonPricingMatrix(pricing=await get_pricing_matrix(db), currency=CURRENCY)
