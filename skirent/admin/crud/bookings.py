import logging
from typing import List, Optional, Tuple

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from skirent.admin.schemas.bookings import AdminBookingCreate, AdminBookingUpdate
from skirent.core.database import db_operation
from skirent.core.exceptions import ValidationError
from skirent.core.logging_utils import log_business_event
from skirent.public.crud.bookings import get_booking_with_products, get_products_by_ids
from skirent.rental.models import Booking, Lesson, ReservationStatus, booking_products
from skirent.rental.services.calendar import booking_guests
from skirent.rental.services.pricing import (
    booking_total,
    to_money,
    validate_booking_window,
    validate_status_transition,
)

logger = logging.getLogger(__name__)

# Изменение этих полей пересчитывает total_price, если он не передан явно
PRICING_FIELDS = {"product_ids", "start_date", "end_date", "number_of_people"}


@db_operation
async def get_bookings_paginated(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 20,
    status: Optional[ReservationStatus] = None,
) -> Tuple[List[Booking], int]:
    query = select(Booking).options(selectinload(Booking.products))
    count_query = select(func.count(Booking.id))

    if status is not None:
        query = query.where(Booking.status == status)
        count_query = count_query.where(Booking.status == status)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(Booking.created_at.desc(), Booking.id.desc()).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total


@db_operation
async def create_admin_booking(db: AsyncSession, booking_data: AdminBookingCreate) -> Booking:
    """Back-office booking: no two-week cap, explicit total wins over the computed one"""
    validate_booking_window(booking_data.start_date, booking_data.end_date, max_span=None)

    products = await get_products_by_ids(db, booking_data.product_ids)
    if booking_data.total_price is not None:
        total = to_money(booking_data.total_price)
    else:
        total = booking_total(
            [p.price for p in products],
            booking_data.start_date,
            booking_data.end_date,
            booking_data.number_of_people,
        )

    booking = Booking(
        first_name=booking_data.first_name,
        last_name=booking_data.last_name,
        phone_number=booking_data.phone_number,
        email=booking_data.email,
        personal_id=(booking_data.personal_id or "").strip(),
        number_of_people=booking_data.number_of_people,
        start_date=booking_data.start_date,
        end_date=booking_data.end_date,
        status=booking_data.status,
        total_price=total,
        products=products,
    )
    db.add(booking)
    await db.commit()

    log_business_event(
        "booking_created",
        "booking",
        booking.id,
        {"total_price": str(total), "source": "admin"},
    )
    return await get_booking_with_products(db, booking.id)


@db_operation
async def update_booking(
    db: AsyncSession, booking_id: int, booking_update: AdminBookingUpdate
) -> Booking:
    booking = await get_booking_with_products(db, booking_id)
    fields = booking_update.model_dump(exclude_unset=True)

    if not fields:
        raise ValidationError("No fields to update")

    old_status = booking.status
    new_status = fields.pop("status", None)
    status_changed = new_status is not None and validate_status_transition(
        "booking", booking.status, new_status
    )

    start = fields.get("start_date") or booking.start_date
    end = fields.get("end_date") or booking.end_date
    if "start_date" in fields or "end_date" in fields:
        validate_booking_window(start, end, max_span=None)

    product_ids = fields.pop("product_ids", None)
    if product_ids is not None:
        booking.products = await get_products_by_ids(db, product_ids)

    total_price = fields.pop("total_price", None)
    for field, value in fields.items():
        if value is None and field in ("first_name", "last_name", "phone_number", "email"):
            continue
        setattr(booking, field, value)

    if total_price is not None:
        booking.total_price = to_money(total_price)
    elif product_ids is not None or PRICING_FIELDS & set(fields):
        booking.total_price = booking_total(
            [p.price for p in booking.products],
            booking.start_date,
            booking.end_date,
            booking_guests(booking.number_of_people),
        )

    if status_changed:
        booking.status = new_status

    await db.commit()

    if status_changed:
        log_business_event(
            "booking_status_changed",
            "booking",
            booking.id,
            {"from": old_status.value, "to": booking.status.value},
        )
    log_business_event("booking_updated", "booking", booking.id, {"fields": sorted(fields)})

    return await get_booking_with_products(db, booking.id)


@db_operation
async def delete_booking(db: AsyncSession, booking_id: int) -> None:
    booking = await get_booking_with_products(db, booking_id)

    await db.execute(delete(booking_products).where(booking_products.c.booking_id == booking.id))
    await db.execute(delete(Booking).where(Booking.id == booking.id))
    await db.commit()

    log_business_event("booking_deleted", "booking", booking_id)


@db_operation
async def get_export_data(db: AsyncSession) -> Tuple[List[Booking], List[Lesson]]:
    """All bookings and lessons, newest first"""
    bookings = await db.execute(
        select(Booking)
        .options(selectinload(Booking.products))
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    lessons = await db.execute(
        select(Lesson)
        .options(selectinload(Lesson.teacher))
        .order_by(Lesson.created_at.desc(), Lesson.id.desc())
    )
    return list(bookings.scalars().all()), list(lessons.scalars().all())
