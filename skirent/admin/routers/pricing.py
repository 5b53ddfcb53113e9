from typing import List

from fastapi import APIRouter, Depends, Path, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from skirent.admin.crud.pricing import delete_lesson_price, upsert_lesson_price, upsert_price_list
from skirent.admin.schemas.pricing import (
    AdminPriceListRead,
    LessonPricingRead,
    LessonPricingResponse,
    LessonPricingUpsert,
    PriceListUpdate,
)
from skirent.auth.core.dependencies import require_admin
from skirent.core.database import get_session
from skirent.core.limits import limiter
from skirent.public.crud.catalog import get_lesson_pricing_rows, get_price_list
from skirent.rental.services.pricing import build_pricing_matrix

router = APIRouter(
    prefix="/admin",
    tags=["Admin Pricing"],
    dependencies=[Depends(require_admin)],
)


@router.get("/prices", response_model=List[AdminPriceListRead])
@limiter.limit("60/minute")
async def list_prices(request: Request, db: AsyncSession = Depends(get_session)):
    return await get_price_list(db)


@router.put("/prices", response_model=List[AdminPriceListRead])
@limiter.limit("20/minute")
async def save_prices(
    request: Request,
    price_update: PriceListUpdate,
    db: AsyncSession = Depends(get_session),
):
    """Upsert price table rows by **item_key**; rows not sent are left unchanged"""
    return await upsert_price_list(db, price_update.items)


@router.get("/lesson-pricing", response_model=LessonPricingResponse)
@limiter.limit("60/minute")
async def list_lesson_pricing(request: Request, db: AsyncSession = Depends(get_session)):
    """Stored rows plus the effective matrix (defaults when nothing is stored)"""
    rows = await get_lesson_pricing_rows(db)
    return LessonPricingResponse(
        matrix=build_pricing_matrix(rows),
        items=[LessonPricingRead.model_validate(row) for row in rows],
    )


@router.post("/lesson-pricing", response_model=LessonPricingRead)
@limiter.limit("30/minute")
async def save_lesson_price(
    request: Request,
    pricing: LessonPricingUpsert,
    db: AsyncSession = Depends(get_session),
):
    """
    Set the price of one people × duration cell.

    - **number_of_people**: 1-4
    - **duration**: 1, 2 or 3 hours
    - **price**: > 0
    """
    return await upsert_lesson_price(db, pricing)


@router.delete("/lesson-pricing/{pricing_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("10/minute")
async def remove_lesson_price(
    request: Request,
    pricing_id: int = Path(..., description="Lesson pricing row ID"),
    db: AsyncSession = Depends(get_session),
):
    await delete_lesson_price(db, pricing_id)
