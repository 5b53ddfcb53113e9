import logging
from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from skirent.core.database import db_operation
from skirent.core.exceptions import NotFoundError, ProductsNotFoundError
from skirent.core.logging_utils import log_business_event
from skirent.public.schemas.bookings import BookingCreate
from skirent.rental.models import Booking, Product, ReservationStatus
from skirent.rental.services.pricing import booking_total, validate_booking_window

logger = logging.getLogger(__name__)


@db_operation
async def get_products_by_ids(db: AsyncSession, product_ids: Iterable[int]) -> List[Product]:
    """
    Load products in the requested order.

    Raises:
        ProductsNotFoundError: if any id does not exist
    """
    ids = list(dict.fromkeys(product_ids))
    result = await db.execute(select(Product).where(Product.id.in_(ids)))
    found = {p.id: p for p in result.scalars().all()}

    missing = set(ids) - set(found)
    if missing:
        raise ProductsNotFoundError(missing)

    return [found[i] for i in ids]


@db_operation
async def get_booking_with_products(db: AsyncSession, booking_id: int) -> Booking:
    result = await db.execute(
        select(Booking)
        .options(selectinload(Booking.products))
        .where(Booking.id == booking_id)
        .execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()

    if not booking:
        raise NotFoundError("Booking", str(booking_id))

    return booking


@db_operation
async def create_booking(
    db: AsyncSession, booking_data: BookingCreate, today: Optional[date] = None
) -> Booking:
    """Create a PENDING booking priced on the server"""
    validate_booking_window(
        booking_data.start_date, booking_data.end_date, today=today or date.today()
    )

    products = await get_products_by_ids(db, booking_data.product_ids)
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
        personal_id=booking_data.personal_id or "",
        number_of_people=booking_data.number_of_people,
        start_date=booking_data.start_date,
        end_date=booking_data.end_date,
        status=ReservationStatus.PENDING,
        total_price=total,
        products=products,
    )

    db.add(booking)
    await db.commit()

    log_business_event(
        "booking_created",
        "booking",
        booking.id,
        {
            "product_ids": booking_data.product_ids,
            "total_price": str(total),
            "source": "public",
        },
    )

    return await get_booking_with_products(db, booking.id)
