from typing import List, Optional, Tuple

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from skirent.admin.schemas.equipment import EquipmentCreate, EquipmentRead, EquipmentUpdate
from skirent.core.database import db_operation
from skirent.core.exceptions import NotFoundError, ValidationError
from skirent.core.logging_utils import log_business_event
from skirent.rental.models import Product, ProductType, SIZED_PRODUCT_TYPES, booking_products
from skirent.rental.services.pricing import to_money


def _with_bookings_count():
    bookings_count = func.count(booking_products.c.id).label("bookings_count")
    return (
        select(Product, bookings_count)
        .outerjoin(booking_products, booking_products.c.product_id == Product.id)
        .group_by(Product.id)
    )


def _to_read(product: Product, bookings_count: int) -> EquipmentRead:
    item = EquipmentRead.model_validate(product)
    item.bookings_count = bookings_count or 0
    return item


def normalized_size(product_type: ProductType, size: Optional[str]) -> Optional[str]:
    """Size only makes sense for boots, helmets and clothing"""
    if product_type not in SIZED_PRODUCT_TYPES:
        return None
    return size or None


@db_operation
async def get_equipment_paginated(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 20,
    product_type: Optional[ProductType] = None,
) -> Tuple[List[EquipmentRead], int]:
    query = _with_bookings_count()
    count_query = select(func.count(Product.id))

    if product_type is not None:
        query = query.where(Product.type == product_type)
        count_query = count_query.where(Product.type == product_type)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(Product.created_at.desc(), Product.id.desc()).offset(skip).limit(limit)
    )
    return [_to_read(product, count) for product, count in result.all()], total


@db_operation
async def get_equipment(db: AsyncSession, product_id: int) -> EquipmentRead:
    result = await db.execute(
        _with_bookings_count()
        .where(Product.id == product_id)
        .execution_options(populate_existing=True)
    )
    row = result.first()

    if not row:
        raise NotFoundError("Product", str(product_id))

    return _to_read(row[0], row[1])


@db_operation
async def create_equipment(db: AsyncSession, equipment_data: EquipmentCreate) -> EquipmentRead:
    product = Product(
        type=equipment_data.type,
        title=equipment_data.title,
        price=to_money(equipment_data.price),
        size=normalized_size(equipment_data.type, equipment_data.size),
        standard=equipment_data.standard,
        professional=equipment_data.professional,
        images=list(equipment_data.images),
    )
    db.add(product)
    await db.commit()

    log_business_event(
        "product_created", "product", product.id, {"type": product.type.value}
    )
    return await get_equipment(db, product.id)


@db_operation
async def update_equipment(
    db: AsyncSession, product_id: int, equipment_update: EquipmentUpdate
) -> EquipmentRead:
    result = await db.execute(select(Product).where(Product.id == product_id))
    product = result.scalar_one_or_none()
    if not product:
        raise NotFoundError("Product", str(product_id))

    fields = equipment_update.model_dump(exclude_unset=True)
    if not fields:
        raise ValidationError("No fields to update")

    for field in ("type", "standard", "professional"):
        if fields.get(field) is not None:
            setattr(product, field, fields[field])
    if fields.get("title") is not None:
        title = fields["title"].strip()
        if not title:
            raise ValidationError("Title cannot be empty")
        product.title = title
    if fields.get("price") is not None:
        product.price = to_money(fields["price"])
    if "images" in fields:
        product.images = list(fields["images"] or [])

    size = product.size
    if "size" in fields:
        size = (fields["size"] or "").strip() or None
    product.size = normalized_size(ProductType(product.type), size)

    await db.commit()

    log_business_event("product_updated", "product", product.id, {"fields": sorted(fields)})
    return await get_equipment(db, product.id)


@db_operation
async def delete_equipment(db: AsyncSession, product_id: int) -> None:
    result = await db.execute(select(Product.id).where(Product.id == product_id))
    if result.scalar_one_or_none() is None:
        raise NotFoundError("Product", str(product_id))

    await db.execute(delete(booking_products).where(booking_products.c.product_id == product_id))
    await db.execute(delete(Product).where(Product.id == product_id))
    await db.commit()

    log_business_event("product_deleted", "product", product_id)
