from datetime import date, datetime
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel

from skirent.admin.schemas.bookings import AdminBookingRead
from skirent.admin.schemas.lessons import AdminLessonRead
from skirent.rental.models import ProductType, ReservationStatus


class OverviewStats(BaseModel):
    total_bookings: int
    active_rentals: int
    total_revenue: float
    total_products: int


class RecentReservation(BaseModel):
    """Booking or lesson row of the dashboard feed"""
    id: int
    type: Literal["booking", "lesson"]
    customer: str
    phone_number: str
    equipment: str
    start_date: date
    end_date: date
    status: ReservationStatus
    total_price: float
    created_at: Optional[datetime] = None


class OverviewResponse(BaseModel):
    stats: OverviewStats
    bookings: List[RecentReservation]


class CustomerRead(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone_number: str
    personal_id: str = ""
    bookings_count: int
    total_spent: float
    last_booking: Optional[datetime] = None


class CustomerListResponse(BaseModel):
    items: List[CustomerRead]
    total: int
    page: int
    size: int
    pages: int


class RevenueReport(BaseModel):
    total: float
    confirmed: float


class StatusCount(BaseModel):
    status: ReservationStatus
    count: int


class MonthCount(BaseModel):
    month: str  # YYYY-MM
    count: int


class BookingsReport(BaseModel):
    total: int
    by_status: List[StatusCount]
    by_month: List[MonthCount]


class TopProduct(BaseModel):
    id: int
    type: ProductType
    title: str
    price: float
    size: Optional[str] = None
    bookings_count: int


class ReportsResponse(BaseModel):
    revenue: RevenueReport
    bookings: BookingsReport
    top_products: List[TopProduct]


class GuestsCalendarResponse(BaseModel):
    date_from: date
    date_to: date
    dates: Dict[str, int]


class DaySummary(BaseModel):
    total_guests: int
    booking_guests: int
    lesson_guests: int
    bookings_count: int
    lessons_count: int


class GuestsDayResponse(BaseModel):
    day: date
    summary: DaySummary
    bookings: List[AdminBookingRead]
    lessons: List[AdminLessonRead]
