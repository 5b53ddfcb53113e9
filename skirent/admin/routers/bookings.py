import io
import math
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from skirent.admin.crud.bookings import (
    create_admin_booking,
    delete_booking,
    get_bookings_paginated,
    get_export_data,
    update_booking,
)
from skirent.admin.schemas.bookings import (
    AdminBookingCreate,
    AdminBookingListResponse,
    AdminBookingRead,
    AdminBookingUpdate,
)
from skirent.auth.core.dependencies import require_admin
from skirent.core.database import get_session
from skirent.core.limits import limiter
from skirent.public.crud.bookings import get_booking_with_products
from skirent.rental.models import ReservationStatus
from skirent.rental.services.export import (
    XLSX_MEDIA_TYPE,
    build_bookings_workbook,
    export_filename,
)

router = APIRouter(
    prefix="/admin/bookings",
    tags=["Admin Bookings"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=AdminBookingListResponse)
@limiter.limit("60/minute")
async def list_bookings(
    request: Request,
    status: Optional[ReservationStatus] = Query(None, description="Filter by status"),
    page: int = Query(1, ge=1, description="Page number starting from 1"),
    size: int = Query(20, ge=1, le=100, description="Number of items per page"),
    db: AsyncSession = Depends(get_session),
):
    bookings, total = await get_bookings_paginated(
        db, skip=(page - 1) * size, limit=size, status=status
    )
    return AdminBookingListResponse(
        items=[AdminBookingRead.from_booking(b) for b in bookings],
        total=total,
        page=page,
        size=size,
        pages=math.ceil(total / size) if total > 0 else 1,
    )


@router.post("", response_model=AdminBookingRead, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def create_booking(
    request: Request,
    booking_data: AdminBookingCreate,
    db: AsyncSession = Depends(get_session),
):
    """
    Create a booking on behalf of a customer.

    - **total_price**: optional, calculated from the products when omitted
    - **status**: initial status (default PENDING)
    """
    booking = await create_admin_booking(db, booking_data)
    return AdminBookingRead.from_booking(booking)


@router.get("/export")
@limiter.limit("10/minute")
async def export_bookings(request: Request, db: AsyncSession = Depends(get_session)):
    """Download all bookings and lessons as an .xlsx spreadsheet"""
    bookings, lessons = await get_export_data(db)
    content = build_bookings_workbook(bookings, lessons)

    return StreamingResponse(
        io.BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(date.today())}"'
        },
    )


@router.get("/{booking_id}", response_model=AdminBookingRead)
@limiter.limit("60/minute")
async def get_booking(
    request: Request,
    booking_id: int = Path(..., description="Booking ID"),
    db: AsyncSession = Depends(get_session),
):
    booking = await get_booking_with_products(db, booking_id)
    return AdminBookingRead.from_booking(booking)


@router.patch("/{booking_id}", response_model=AdminBookingRead)
@limiter.limit("30/minute")
async def patch_booking(
    request: Request,
    booking_update: AdminBookingUpdate,
    booking_id: int = Path(..., description="Booking ID"),
    db: AsyncSession = Depends(get_session),
):
    """
    Update a booking.

    Status follows PENDING → CONFIRMED/CANCELLED, CONFIRMED → COMPLETED/CANCELLED.
    The total is recalculated when products, dates or people change and no
    explicit **total_price** is sent.
    """
    booking = await update_booking(db, booking_id, booking_update)
    return AdminBookingRead.from_booking(booking)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("10/minute")
async def remove_booking(
    request: Request,
    booking_id: int = Path(..., description="Booking ID"),
    db: AsyncSession = Depends(get_session),
):
    await delete_booking(db, booking_id)
