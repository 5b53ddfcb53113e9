from typing import List

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from skirent.admin.schemas.pricing import LessonPricingUpsert, PriceListItem
from skirent.core.database import db_operation
from skirent.core.exceptions import NotFoundError
from skirent.core.logging_utils import log_business_event
from skirent.public.crud.catalog import get_price_list
from skirent.rental.models import LessonPricing, PriceList
from skirent.rental.services.pricing import to_money, validate_lesson_shape


@db_operation
async def upsert_price_list(db: AsyncSession, items: List[PriceListItem]) -> List[PriceList]:
    """Update rows matched by item_key, insert the rest"""
    keys = [item.item_key for item in items]
    result = await db.execute(select(PriceList).where(PriceList.item_key.in_(keys)))
    existing = {row.item_key: row for row in result.scalars().all()}

    for item in items:
        row = existing.get(item.item_key)
        if row is None:
            row = PriceList(item_key=item.item_key)
            db.add(row)
            existing[item.item_key] = row
        row.type = item.type
        row.includes = item.includes
        row.price = item.price

    await db.commit()

    log_business_event("price_list_updated", "price_list", 0, {"item_keys": keys})
    return await get_price_list(db)


@db_operation
async def upsert_lesson_price(db: AsyncSession, data: LessonPricingUpsert) -> LessonPricing:
    validate_lesson_shape(data.number_of_people, data.duration)

    result = await db.execute(
        select(LessonPricing).where(
            LessonPricing.number_of_people == data.number_of_people,
            LessonPricing.duration == data.duration,
        )
    )
    row = result.scalar_one_or_none()
    if row is None:
        row = LessonPricing(number_of_people=data.number_of_people, duration=data.duration)
        db.add(row)
    row.price = to_money(data.price)

    await db.commit()

    log_business_event(
        "lesson_price_updated",
        "lesson_pricing",
        row.id,
        {
            "number_of_people": data.number_of_people,
            "duration": data.duration,
            "price": str(row.price),
        },
    )
    return row


@db_operation
async def delete_lesson_price(db: AsyncSession, pricing_id: int) -> None:
    result = await db.execute(select(LessonPricing.id).where(LessonPricing.id == pricing_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Lesson pricing", str(pricing_id))

    await db.execute(delete(LessonPricing).where(LessonPricing.id == pricing_id))
    await db.commit()

    log_business_event("lesson_price_deleted", "lesson_pricing", pricing_id)
