import math
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from skirent.admin.crud.dashboard import (
    get_customers,
    get_guests_calendar,
    get_guests_day,
    get_overview,
    get_reports,
)
from skirent.admin.schemas.dashboard import (
    CustomerListResponse,
    GuestsCalendarResponse,
    GuestsDayResponse,
    OverviewResponse,
    ReportsResponse,
)
from skirent.auth.core.dependencies import require_admin
from skirent.core.database import get_session
from skirent.core.exceptions import ValidationError
from skirent.core.limits import limiter
from skirent.core.validations import parse_iso_date
from skirent.rental.services.calendar import month_range

router = APIRouter(
    prefix="/admin",
    tags=["Admin Dashboard"],
    dependencies=[Depends(require_admin)],
)


@router.get("/overview", response_model=OverviewResponse)
@limiter.limit("60/minute")
async def overview(request: Request, db: AsyncSession = Depends(get_session)):
    """Totals across bookings and lessons plus the 8 latest reservations"""
    return await get_overview(db)


@router.get("/customers", response_model=CustomerListResponse)
@limiter.limit("60/minute")
async def list_customers(
    request: Request,
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
):
    customers, total = await get_customers(db, skip=(page - 1) * size, limit=size)
    return CustomerListResponse(
        items=customers,
        total=total,
        page=page,
        size=size,
        pages=math.ceil(total / size) if total > 0 else 1,
    )


@router.get("/reports", response_model=ReportsResponse)
@limiter.limit("30/minute")
async def reports(
    request: Request,
    start_date: Optional[date] = Query(None, description="Created on or after (YYYY-MM-DD)"),
    end_date: Optional[date] = Query(None, description="Created on or before (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_session),
):
    """
    Revenue and booking statistics.

    - revenue.total counts CONFIRMED and COMPLETED bookings, revenue.confirmed only CONFIRMED
    - bookings.by_month covers the last 12 months unless **start_date** is given
    - top_products lists the 10 most booked products
    """
    return await get_reports(db, start_date, end_date)


@router.get("/guests-calendar", response_model=GuestsCalendarResponse)
@limiter.limit("60/minute")
async def guests_calendar(
    request: Request,
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None),
    date_from: Optional[str] = Query(None, description="YYYY-MM-DD"),
    date_to: Optional[str] = Query(None, description="YYYY-MM-DD"),
    db: AsyncSession = Depends(get_session),
):
    """
    Guests per day: a month (**year** + **month**) or an explicit range of up
    to 93 days (**date_from** + **date_to**). Defaults to the current month.
    """
    if date_from or date_to:
        if not (date_from and date_to):
            raise ValidationError("Both date_from and date_to are required")
        start = parse_iso_date(date_from, "date_from")
        end = parse_iso_date(date_to, "date_to")
    else:
        today = date.today()
        start, end = month_range(
            year if year is not None else today.year,
            month if month is not None else today.month,
        )

    return await get_guests_calendar(db, start, end)


@router.get("/guests-calendar/day", response_model=GuestsDayResponse)
@limiter.limit("60/minute")
async def guests_calendar_day(
    request: Request,
    date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    db: AsyncSession = Depends(get_session),
):
    """Bookings and lessons on one day with guest totals"""
    return await get_guests_day(db, parse_iso_date(date, "date"))
