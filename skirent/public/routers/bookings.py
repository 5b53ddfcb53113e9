from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from skirent.core.database import get_session
from skirent.core.limits import limiter
from skirent.public.crud.bookings import create_booking
from skirent.public.crud.lessons import create_lesson
from skirent.public.schemas.bookings import (
    BookingCreate,
    BookingCreatedResponse,
    BookingSummary,
)
from skirent.public.schemas.lessons import (
    LessonCreate,
    LessonCreatedResponse,
    LessonSummary,
)
from skirent.rental.labels import equipment_list, lesson_description

router = APIRouter(tags=["Reservations"])


@router.post(
    "/bookings", response_model=BookingCreatedResponse, status_code=status.HTTP_201_CREATED
)
@limiter.limit("10/minute")
async def submit_booking(
    request: Request,
    booking_data: BookingCreate,
    db: AsyncSession = Depends(get_session),
):
    """
    Submit an equipment rental request.

    - **product_ids**: one or more products (``product_id`` is also accepted)
    - **start_date** / **end_date**: inclusive, at most 14 days apart, not in the past
    - **number_of_people**: 1-20

    The total price is calculated on the server.
    """
    booking = await create_booking(db, booking_data)

    return BookingCreatedResponse(
        id=booking.id,
        message="Booking created successfully",
        booking=BookingSummary(
            id=booking.id,
            customer=booking.customer,
            equipment=equipment_list(booking.products),
            start_date=booking.start_date,
            end_date=booking.end_date,
            number_of_people=booking.number_of_people,
            total_price=booking.total_price,
            status=booking.status,
        ),
    )


@router.post(
    "/lessons", response_model=LessonCreatedResponse, status_code=status.HTTP_201_CREATED
)
@limiter.limit("10/minute")
async def submit_lesson(
    request: Request,
    lesson_data: LessonCreate,
    db: AsyncSession = Depends(get_session),
):
    """
    Reserve a ski or snowboard lesson.

    - **number_of_people**: 1-4
    - **duration**: 1, 2 or 3 hours
    - **start_time**: HH:MM between 10:00 and 16:00
    """
    lesson = await create_lesson(db, lesson_data)

    return LessonCreatedResponse(
        id=lesson.id,
        message="Lesson booking created successfully",
        lesson=LessonSummary(
            id=lesson.id,
            customer=lesson.customer,
            description=lesson_description(lesson),
            date=lesson.date,
            start_time=lesson.start_time,
            language=lesson.language,
            total_price=lesson.total_price,
            status=lesson.status,
        ),
    )
