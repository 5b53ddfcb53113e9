"""Price calculation and reservation rules for rental bookings and lessons"""
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Mapping, Optional, Union

from skirent.core.exceptions import ValidationError, InvalidStatusTransitionError
from skirent.core.validations import TIME_PATTERN
from skirent.rental.models.status import ReservationStatus

Number = Union[int, float, Decimal]
PricingMatrix = Dict[int, Dict[int, Decimal]]

MAX_BOOKING_SPAN_DAYS = 14

LESSON_PEOPLE_RANGE = range(1, 5)
LESSON_DURATIONS = (1, 2, 3)
LESSON_FIRST_HOUR = 10
LESSON_CLOSING_HOUR = 16

DEFAULT_LESSON_PRICING: PricingMatrix = {
    1: {1: Decimal("120"), 2: Decimal("200"), 3: Decimal("270")},
    2: {1: Decimal("200"), 2: Decimal("360"), 3: Decimal("480")},
    3: {1: Decimal("270"), 2: Decimal("480"), 3: Decimal("720")},
    4: {1: Decimal("400"), 2: Decimal("640"), 3: Decimal("960")},
}

_CENT = Decimal("0.01")

# current -> statuses an admin may move to
STATUS_TRANSITIONS = {
    ReservationStatus.PENDING: {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED},
    ReservationStatus.CONFIRMED: {ReservationStatus.COMPLETED, ReservationStatus.CANCELLED},
    ReservationStatus.CANCELLED: set(),
    ReservationStatus.COMPLETED: set(),
}


def to_money(value: Number) -> Decimal:
    return Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)


def rental_days(start: date, end: date) -> int:
    """Number of rental days, counting both the start and the end day"""
    return (end - start).days + 1


def validate_booking_window(
    start: date,
    end: date,
    today: Optional[date] = None,
    max_span: Optional[int] = MAX_BOOKING_SPAN_DAYS,
) -> None:
    """
    Check a rental date range.

    ``today`` enables the no-past-dates rule used for customer bookings;
    ``max_span=None`` disables the two-week cap for admin-entered bookings.
    """
    if end < start:
        raise ValidationError(
            "End date must be after or equal to start date",
            {"start_date": start.isoformat(), "end_date": end.isoformat()},
        )

    if max_span is not None and (end - start).days > max_span:
        raise ValidationError(
            f"Booking period cannot exceed 2 weeks ({max_span} days)",
            {"max_days": max_span, "requested_days": (end - start).days},
        )

    if today is not None and start < today:
        raise ValidationError("Start date cannot be in the past")


def booking_total(
    prices: Iterable[Number], start: date, end: date, number_of_people: int
) -> Decimal:
    """Sum of the per-day product prices x rental days x people"""
    if number_of_people < 1:
        raise ValidationError("Number of people must be at least 1")

    price_sum = sum((Decimal(str(p)) for p in prices), Decimal("0"))
    days = rental_days(start, end)
    return to_money(price_sum * days * number_of_people)


def build_pricing_matrix(rows: Iterable) -> PricingMatrix:
    """
    Turn LessonPricing rows into ``{people: {duration: price}}``.

    Falls back to DEFAULT_LESSON_PRICING when no rows are configured.
    """
    matrix: PricingMatrix = {}
    for row in rows:
        matrix.setdefault(int(row.number_of_people), {})[int(row.duration)] = to_money(
            row.price
        )

    if not matrix:
        return {people: dict(cells) for people, cells in DEFAULT_LESSON_PRICING.items()}
    return matrix


def validate_lesson_shape(number_of_people: int, duration: int) -> None:
    if number_of_people not in LESSON_PEOPLE_RANGE:
        raise ValidationError("Number of people must be between 1 and 4")
    if duration not in LESSON_DURATIONS:
        raise ValidationError("Duration must be 1, 2, or 3 hours")


def lesson_price(matrix: Mapping[int, Mapping[int, Number]], number_of_people: int, duration: int) -> Decimal:
    validate_lesson_shape(number_of_people, duration)

    price = matrix.get(number_of_people, {}).get(duration)
    if not price:
        raise ValidationError(
            "Invalid pricing combination",
            {"number_of_people": number_of_people, "duration": duration},
        )
    return to_money(price)


def validate_lesson_start(start_time: str) -> str:
    """Lessons start on the hour grid between 10:00 and 15:xx"""
    match = TIME_PATTERN.match(start_time or "")
    if not match:
        raise ValidationError("Start time must be in HH:MM format")

    hour = int(match.group(1))
    if hour < LESSON_FIRST_HOUR or hour >= LESSON_CLOSING_HOUR:
        raise ValidationError("Start time must be between 10:00 and 16:00")
    return start_time


def validate_status_transition(
    resource: str, current: ReservationStatus, new: ReservationStatus
) -> bool:
    """
    Returns True when the status actually changes, False for a no-op.
    """
    current = ReservationStatus(current)
    new = ReservationStatus(new)
    if current == new:
        return False
    if new not in STATUS_TRANSITIONS[current]:
        raise InvalidStatusTransitionError(resource, current.value, new.value)
    return True
