"""Aggregates for the back office: overview, customers, reports, guest calendar"""
import calendar as _calendar
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from skirent.admin.schemas.bookings import AdminBookingRead
from skirent.admin.schemas.dashboard import (
    BookingsReport,
    CustomerRead,
    DaySummary,
    GuestsCalendarResponse,
    GuestsDayResponse,
    MonthCount,
    OverviewResponse,
    OverviewStats,
    RecentReservation,
    ReportsResponse,
    RevenueReport,
    StatusCount,
    TopProduct,
)
from skirent.admin.schemas.lessons import AdminLessonRead
from skirent.core.database import db_operation
from skirent.core.exceptions import ValidationError
from skirent.rental.labels import equipment_list, lesson_description
from skirent.rental.models import (
    ACTIVE_STATUSES,
    REVENUE_STATUSES,
    Booking,
    Lesson,
    Product,
    ReservationStatus,
    booking_products,
)
from skirent.rental.services.calendar import booking_guests, guests_per_day, validate_range
from skirent.rental.services.pricing import to_money

RECENT_LIMIT = 8
REPORT_MONTHS = 12
TOP_PRODUCTS_LIMIT = 10


async def _scalar(db: AsyncSession, query) -> Any:
    return (await db.execute(query)).scalar()


def _money(value) -> Decimal:
    return to_money(value or 0)


def months_ago(day: date, months: int) -> date:
    """Same day ``months`` calendar months earlier, clamped to the month end"""
    year, month = divmod(day.year * 12 + (day.month - 1) - months, 12)
    month += 1
    return date(year, month, min(day.day, _calendar.monthrange(year, month)[1]))


def _created_filter(query, column, start_date: Optional[date], end_date: Optional[date]):
    if start_date:
        query = query.where(column >= datetime.combine(start_date, time.min))
    if end_date:
        query = query.where(column <= datetime.combine(end_date, time.max))
    return query


# === Overview ===
@db_operation
async def get_overview(db: AsyncSession) -> OverviewResponse:
    total_bookings = await _scalar(db, select(func.count(Booking.id))) or 0
    total_lessons = await _scalar(db, select(func.count(Lesson.id))) or 0

    active_bookings = await _scalar(
        db, select(func.count(Booking.id)).where(Booking.status.in_(ACTIVE_STATUSES))
    ) or 0
    active_lessons = await _scalar(
        db, select(func.count(Lesson.id)).where(Lesson.status.in_(ACTIVE_STATUSES))
    ) or 0

    bookings_revenue = await _scalar(
        db, select(func.sum(Booking.total_price)).where(Booking.status.in_(REVENUE_STATUSES))
    )
    lessons_revenue = await _scalar(
        db, select(func.sum(Lesson.total_price)).where(Lesson.status.in_(REVENUE_STATUSES))
    )
    total_products = await _scalar(db, select(func.count(Product.id))) or 0

    recent_bookings = await db.execute(
        select(Booking)
        .options(selectinload(Booking.products))
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .limit(RECENT_LIMIT)
    )
    recent_lessons = await db.execute(
        select(Lesson).order_by(Lesson.created_at.desc(), Lesson.id.desc()).limit(RECENT_LIMIT)
    )

    feed = [
        RecentReservation(
            id=b.id,
            type="booking",
            customer=b.customer,
            phone_number=b.phone_number,
            equipment=equipment_list(b.products),
            start_date=b.start_date,
            end_date=b.end_date,
            status=b.status,
            total_price=b.total_price,
            created_at=b.created_at,
        )
        for b in recent_bookings.scalars().all()
    ] + [
        RecentReservation(
            id=lesson.id,
            type="lesson",
            customer=lesson.customer,
            phone_number=lesson.phone_number,
            equipment=lesson_description(lesson, with_duration=False),
            start_date=lesson.date,
            end_date=lesson.date,
            status=lesson.status,
            total_price=lesson.total_price,
            created_at=lesson.created_at,
        )
        for lesson in recent_lessons.scalars().all()
    ]
    feed.sort(key=lambda item: (item.created_at is not None, item.created_at), reverse=True)

    return OverviewResponse(
        stats=OverviewStats(
            total_bookings=total_bookings + total_lessons,
            active_rentals=active_bookings + active_lessons,
            total_revenue=_money(bookings_revenue) + _money(lessons_revenue),
            total_products=total_products,
        ),
        bookings=feed[:RECENT_LIMIT],
    )


# === Customers ===
@db_operation
async def get_customers(
    db: AsyncSession, skip: int = 0, limit: int = 20
) -> Tuple[List[CustomerRead], int]:
    """One row per distinct booking email, most recently active first"""
    total = await _scalar(db, select(func.count(func.distinct(Booking.email)))) or 0

    last_booking = func.max(Booking.created_at).label("last_booking")
    result = await db.execute(
        select(
            Booking.email,
            func.count(Booking.id).label("bookings_count"),
            func.sum(Booking.total_price).label("total_spent"),
            last_booking,
        )
        .group_by(Booking.email)
        .order_by(last_booking.desc(), Booking.email)
        .offset(skip)
        .limit(limit)
    )
    rows = result.all()
    if not rows:
        return [], total

    # Контактные данные берём из последнего бронирования клиента
    latest = await db.execute(
        select(Booking)
        .where(Booking.email.in_([row.email for row in rows]))
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    contacts: Dict[str, Booking] = {}
    for booking in latest.scalars().all():
        contacts.setdefault(booking.email, booking)

    customers = []
    for row in rows:
        contact = contacts[row.email]
        customers.append(
            CustomerRead(
                first_name=contact.first_name,
                last_name=contact.last_name,
                email=row.email,
                phone_number=contact.phone_number,
                personal_id=contact.personal_id or "",
                bookings_count=row.bookings_count,
                total_spent=_money(row.total_spent),
                last_booking=row.last_booking,
            )
        )
    return customers, total


# === Reports ===
@db_operation
async def get_reports(
    db: AsyncSession,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> ReportsResponse:
    """
    Отчёт по бронированиям оборудования.

    start_date/end_date filter by creation time. The monthly breakdown
    defaults to the last 12 months when start_date is not given.
    """
    if start_date and end_date and start_date > end_date:
        raise ValidationError("start_date must be before end_date")

    def created(query):
        return _created_filter(query, Booking.created_at, start_date, end_date)

    revenue_total = await _scalar(
        db, created(select(func.sum(Booking.total_price)).where(Booking.status.in_(REVENUE_STATUSES)))
    )
    revenue_confirmed = await _scalar(
        db,
        created(
            select(func.sum(Booking.total_price)).where(
                Booking.status == ReservationStatus.CONFIRMED
            )
        ),
    )
    bookings_total = await _scalar(db, created(select(func.count(Booking.id)))) or 0

    status_rows = await db.execute(
        created(select(Booking.status, func.count(Booking.id)).group_by(Booking.status))
    )
    status_counts = {ReservationStatus(status): count for status, count in status_rows.all()}
    by_status = [
        StatusCount(status=status, count=status_counts[status])
        for status in ReservationStatus
        if status in status_counts
    ]

    month_start = start_date or months_ago(today or date.today(), REPORT_MONTHS)
    created_rows = await db.execute(
        _created_filter(select(Booking.created_at), Booking.created_at, month_start, end_date)
    )
    months: Dict[str, int] = {}
    for (created_at,) in created_rows.all():
        if created_at is None:
            continue
        key = created_at.strftime("%Y-%m")
        months[key] = months.get(key, 0) + 1
    by_month = [
        MonthCount(month=month, count=months[month])
        for month in sorted(months, reverse=True)[:REPORT_MONTHS]
    ]

    bookings_count = func.count(booking_products.c.id).label("bookings_count")
    top_rows = await db.execute(
        select(Product, bookings_count)
        .outerjoin(booking_products, booking_products.c.product_id == Product.id)
        .group_by(Product.id)
        .order_by(bookings_count.desc(), Product.id)
        .limit(TOP_PRODUCTS_LIMIT)
    )
    top_products = [
        TopProduct(
            id=product.id,
            type=product.type,
            title=product.title,
            price=product.price,
            size=product.size,
            bookings_count=count,
        )
        for product, count in top_rows.all()
    ]

    return ReportsResponse(
        revenue=RevenueReport(total=_money(revenue_total), confirmed=_money(revenue_confirmed)),
        bookings=BookingsReport(total=bookings_total, by_status=by_status, by_month=by_month),
        top_products=top_products,
    )


# === Guests calendar ===
@db_operation
async def get_guests_calendar(
    db: AsyncSession, date_from: date, date_to: date
) -> GuestsCalendarResponse:
    validate_range(date_from, date_to)

    bookings = await db.execute(
        select(Booking.start_date, Booking.end_date, Booking.number_of_people).where(
            Booking.status != ReservationStatus.CANCELLED,
            Booking.start_date <= date_to,
            Booking.end_date >= date_from,
        )
    )
    lessons = await db.execute(
        select(Lesson.date, Lesson.number_of_people).where(
            Lesson.status != ReservationStatus.CANCELLED,
            Lesson.date >= date_from,
            Lesson.date <= date_to,
        )
    )

    return GuestsCalendarResponse(
        date_from=date_from,
        date_to=date_to,
        dates=guests_per_day(
            date_from,
            date_to,
            [tuple(row) for row in bookings.all()],
            [tuple(row) for row in lessons.all()],
        ),
    )


@db_operation
async def get_guests_day(db: AsyncSession, day: date) -> GuestsDayResponse:
    bookings_result = await db.execute(
        select(Booking)
        .options(selectinload(Booking.products))
        .where(
            Booking.status != ReservationStatus.CANCELLED,
            Booking.start_date <= day,
            Booking.end_date >= day,
        )
        .order_by(Booking.start_date, Booking.id)
    )
    lessons_result = await db.execute(
        select(Lesson)
        .options(selectinload(Lesson.teacher))
        .where(Lesson.status != ReservationStatus.CANCELLED, Lesson.date == day)
        .order_by(Lesson.start_time, Lesson.id)
    )
    bookings = list(bookings_result.scalars().all())
    lessons = list(lessons_result.scalars().all())

    booking_guest_count = sum(booking_guests(b.number_of_people) for b in bookings)
    lesson_guest_count = sum(lesson.number_of_people or 0 for lesson in lessons)

    return GuestsDayResponse(
        day=day,
        summary=DaySummary(
            total_guests=booking_guest_count + lesson_guest_count,
            booking_guests=booking_guest_count,
            lesson_guests=lesson_guest_count,
            bookings_count=len(bookings),
            lessons_count=len(lessons),
        ),
        bookings=[AdminBookingRead.from_booking(b) for b in bookings],
        lessons=[AdminLessonRead.from_lesson(lesson) for lesson in lessons],
    )
