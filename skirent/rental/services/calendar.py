"""Guest counts per calendar day for the admin calendar"""
import calendar as _calendar
from collections import OrderedDict
from datetime import date, timedelta
from typing import Dict, Iterable, Iterator, Optional, Tuple

from skirent.core.exceptions import ValidationError

MAX_CALENDAR_RANGE_DAYS = 93

# (start_date, end_date, number_of_people)
BookingSpan = Tuple[date, date, Optional[int]]
# (lesson_date, number_of_people)
LessonSlot = Tuple[date, int]


def month_range(year: int, month: int) -> Tuple[date, date]:
    if not (1 <= month <= 12) or not (1 <= year <= 9999):
        raise ValidationError("Invalid year or month")
    last_day = _calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def validate_range(date_from: date, date_to: date) -> int:
    """Returns the inclusive number of days in the range"""
    if date_from > date_to:
        raise ValidationError("date_from must be before date_to")

    days = (date_to - date_from).days + 1
    if days > MAX_CALENDAR_RANGE_DAYS:
        raise ValidationError(
            f"Date range must not exceed {MAX_CALENDAR_RANGE_DAYS} days",
            {"max_days": MAX_CALENDAR_RANGE_DAYS, "requested_days": days},
        )
    return days


def iter_days(date_from: date, date_to: date) -> Iterator[date]:
    current = date_from
    while current <= date_to:
        yield current
        current += timedelta(days=1)


def booking_guests(number_of_people: Optional[int]) -> int:
    """A booking without a head count still brings one guest"""
    return number_of_people if number_of_people and number_of_people > 0 else 1


def guests_per_day(
    date_from: date,
    date_to: date,
    bookings: Iterable[BookingSpan],
    lessons: Iterable[LessonSlot],
) -> Dict[str, int]:
    """
    Aggregate guests for every day in [date_from, date_to].

    Callers pass only non-cancelled reservations. A booking counts once per
    day it covers, however many products it holds.
    """
    counts = OrderedDict((day.isoformat(), 0) for day in iter_days(date_from, date_to))

    for start, end, people in bookings:
        first = max(start, date_from)
        last = min(end, date_to)
        if first > last:
            continue
        guests = booking_guests(people)
        for day in iter_days(first, last):
            counts[day.isoformat()] += guests

    for lesson_date, people in lessons:
        key = lesson_date.isoformat()
        if key in counts:
            counts[key] += people or 0

    return dict(counts)
