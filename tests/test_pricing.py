from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from skirent.core.exceptions import BusinessLogicError, ValidationError
from skirent.rental.models import ReservationStatus
from skirent.rental.services.pricing import (
    DEFAULT_LESSON_PRICING,
    booking_total,
    build_pricing_matrix,
    lesson_price,
    rental_days,
    to_money,
    validate_booking_window,
    validate_lesson_start,
    validate_status_transition,
)


def test_rental_days_counts_both_ends():
    assert rental_days(date(2026, 1, 10), date(2026, 1, 10)) == 1
    assert rental_days(date(2026, 1, 10), date(2026, 1, 12)) == 3


def test_booking_total_sums_products_days_and_people():
    total = booking_total(
        [Decimal("40"), Decimal("30"), 10.5], date(2026, 1, 10), date(2026, 1, 12), 2
    )
    assert total == Decimal("483.00")


def test_booking_total_rounds_half_up():
    assert booking_total([Decimal("0.005")], date(2026, 1, 1), date(2026, 1, 1), 1) == Decimal("0.01")
    assert to_money(2.675) == Decimal("2.68")


def test_booking_total_requires_people():
    with pytest.raises(ValidationError):
        booking_total([10], date(2026, 1, 1), date(2026, 1, 1), 0)


def test_window_allows_same_day_and_fourteen_days():
    validate_booking_window(date(2026, 1, 1), date(2026, 1, 1))
    validate_booking_window(date(2026, 1, 1), date(2026, 1, 15))


def test_window_rejects_end_before_start():
    with pytest.raises(ValidationError) as exc:
        validate_booking_window(date(2026, 1, 2), date(2026, 1, 1))
    assert exc.value.message == "End date must be after or equal to start date"


def test_window_rejects_more_than_two_weeks():
    with pytest.raises(ValidationError) as exc:
        validate_booking_window(date(2026, 1, 1), date(2026, 1, 16))
    assert exc.value.message == "Booking period cannot exceed 2 weeks (14 days)"
    assert exc.value.details["requested_days"] == 15


def test_window_cap_can_be_disabled():
    validate_booking_window(date(2026, 1, 1), date(2026, 3, 1), max_span=None)


def test_window_rejects_past_start_when_today_given():
    with pytest.raises(ValidationError) as exc:
        validate_booking_window(
            date(2026, 1, 1), date(2026, 1, 2), today=date(2026, 1, 2)
        )
    assert exc.value.message == "Start date cannot be in the past"


def test_pricing_matrix_falls_back_to_defaults():
    matrix = build_pricing_matrix([])
    assert matrix == DEFAULT_LESSON_PRICING
    matrix[1][1] = Decimal("1")
    assert DEFAULT_LESSON_PRICING[1][1] == Decimal("120")


def test_pricing_matrix_from_rows():
    rows = [
        SimpleNamespace(number_of_people=1, duration=1, price=Decimal("150")),
        SimpleNamespace(number_of_people=2, duration=3, price=500),
    ]
    assert build_pricing_matrix(rows) == {
        1: {1: Decimal("150.00")},
        2: {3: Decimal("500.00")},
    }


def test_lesson_price_lookup():
    assert lesson_price(DEFAULT_LESSON_PRICING, 2, 2) == Decimal("360.00")
    assert lesson_price(DEFAULT_LESSON_PRICING, 4, 3) == Decimal("960.00")


@pytest.mark.parametrize(
    "people, duration, message",
    [
        (0, 1, "Number of people must be between 1 and 4"),
        (5, 1, "Number of people must be between 1 and 4"),
        (1, 4, "Duration must be 1, 2, or 3 hours"),
    ],
)
def test_lesson_price_rejects_out_of_range(people, duration, message):
    with pytest.raises(ValidationError) as exc:
        lesson_price(DEFAULT_LESSON_PRICING, people, duration)
    assert exc.value.message == message


def test_lesson_price_missing_cell():
    with pytest.raises(ValidationError) as exc:
        lesson_price({1: {1: Decimal("100")}}, 1, 2)
    assert exc.value.message == "Invalid pricing combination"


@pytest.mark.parametrize("start", ["10:00", "12:30", "15:59"])
def test_lesson_start_accepts_working_hours(start):
    assert validate_lesson_start(start) == start


@pytest.mark.parametrize("start", ["09:59", "16:00", "18:00"])
def test_lesson_start_rejects_outside_hours(start):
    with pytest.raises(ValidationError) as exc:
        validate_lesson_start(start)
    assert exc.value.message == "Start time must be between 10:00 and 16:00"


@pytest.mark.parametrize("start", ["", "9:00", "10-00", "25:00"])
def test_lesson_start_rejects_bad_format(start):
    with pytest.raises(ValidationError):
        validate_lesson_start(start)


def test_status_transitions():
    S = ReservationStatus
    assert validate_status_transition("booking", S.PENDING, S.CONFIRMED) is True
    assert validate_status_transition("booking", S.PENDING, S.CANCELLED) is True
    assert validate_status_transition("booking", S.CONFIRMED, S.COMPLETED) is True
    assert validate_status_transition("booking", S.CONFIRMED, S.CONFIRMED) is False


@pytest.mark.parametrize(
    "current, new",
    [
        (ReservationStatus.PENDING, ReservationStatus.COMPLETED),
        (ReservationStatus.CANCELLED, ReservationStatus.CONFIRMED),
        (ReservationStatus.COMPLETED, ReservationStatus.PENDING),
        (ReservationStatus.CONFIRMED, ReservationStatus.PENDING),
    ],
)
def test_status_transition_rejected(current, new):
    with pytest.raises(BusinessLogicError) as exc:
        validate_status_transition("lesson", current, new)
    assert exc.value.details == {
        "resource": "lesson",
        "current": current.value,
        "requested": new.value,
    }
