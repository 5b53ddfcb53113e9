from datetime import date

import pytest

from skirent.core.exceptions import ValidationError
from skirent.rental.services.calendar import (
    booking_guests,
    guests_per_day,
    month_range,
    validate_range,
)


def test_month_range():
    assert month_range(2026, 2) == (date(2026, 2, 1), date(2026, 2, 28))
    assert month_range(2028, 2) == (date(2028, 2, 1), date(2028, 2, 29))
    assert month_range(2026, 12) == (date(2026, 12, 1), date(2026, 12, 31))


@pytest.mark.parametrize("year, month", [(2026, 0), (2026, 13), (0, 5)])
def test_month_range_invalid(year, month):
    with pytest.raises(ValidationError) as exc:
        month_range(year, month)
    assert exc.value.message == "Invalid year or month"


def test_validate_range_limits():
    assert validate_range(date(2026, 1, 1), date(2026, 1, 1)) == 1
    assert validate_range(date(2026, 1, 1), date(2026, 4, 3)) == 93

    with pytest.raises(ValidationError) as exc:
        validate_range(date(2026, 1, 1), date(2026, 4, 4))
    assert exc.value.message == "Date range must not exceed 93 days"

    with pytest.raises(ValidationError) as exc:
        validate_range(date(2026, 1, 2), date(2026, 1, 1))
    assert exc.value.message == "date_from must be before date_to"


def test_booking_without_head_count_is_one_guest():
    assert booking_guests(None) == 1
    assert booking_guests(0) == 1
    assert booking_guests(3) == 3


def test_guests_per_day_includes_every_day():
    counts = guests_per_day(date(2026, 1, 1), date(2026, 1, 3), [], [])
    assert counts == {"2026-01-01": 0, "2026-01-02": 0, "2026-01-03": 0}
    assert list(counts) == sorted(counts)


def test_guests_per_day_aggregates_bookings_and_lessons():
    bookings = [
        # overlaps the start of the range
        (date(2025, 12, 30), date(2026, 1, 2), 2),
        # no head count
        (date(2026, 1, 2), date(2026, 1, 2), None),
        # entirely outside
        (date(2026, 1, 10), date(2026, 1, 12), 5),
    ]
    lessons = [(date(2026, 1, 3), 3), (date(2026, 2, 1), 4)]

    counts = guests_per_day(date(2026, 1, 1), date(2026, 1, 4), bookings, lessons)

    assert counts == {
        "2026-01-01": 2,
        "2026-01-02": 3,
        "2026-01-03": 3,
        "2026-01-04": 0,
    }
