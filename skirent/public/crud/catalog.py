from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func

from skirent.core.database import db_operation
from skirent.core.exceptions import NotFoundError
from skirent.rental.models import Product, ProductType, PriceList, Teacher, LessonPricing
from skirent.rental.services.pricing import PricingMatrix, build_pricing_matrix


@db_operation
async def get_product_by_id(db: AsyncSession, product_id: int) -> Product:
    result = await db.execute(select(Product).where(Product.id == product_id))
    product = result.scalar_one_or_none()

    if not product:
        raise NotFoundError("Product", str(product_id))

    return product


@db_operation
async def get_products_paginated(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 20,
    product_type: Optional[ProductType] = None,
) -> Tuple[List[Product], int]:
    """Catalog page, cheapest first within a type"""
    query = select(Product)
    count_query = select(func.count(Product.id))

    if product_type is not None:
        query = query.where(Product.type == product_type)
        count_query = count_query.where(Product.type == product_type)

    total = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(
        query.order_by(Product.type, Product.price, Product.id).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total


@db_operation
async def get_price_list(db: AsyncSession) -> List[PriceList]:
    result = await db.execute(
        select(PriceList)
        .order_by(PriceList.created_at, PriceList.id)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


@db_operation
async def get_teachers(db: AsyncSession) -> List[Teacher]:
    result = await db.execute(
        select(Teacher).order_by(Teacher.firstname, Teacher.lastname)
    )
    return list(result.scalars().all())


@db_operation
async def get_lesson_pricing_rows(db: AsyncSession) -> List[LessonPricing]:
    result = await db.execute(
        select(LessonPricing).order_by(LessonPricing.number_of_people, LessonPricing.duration)
    )
    return list(result.scalars().all())


async def get_pricing_matrix(db: AsyncSession) -> PricingMatrix:
    """Configured lesson prices, or the defaults when none are stored"""
    return build_pricing_matrix(await get_lesson_pricing_rows(db))
