import io
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import openpyxl
import pytest

from skirent.core.exceptions import ValidationError
from skirent.rental.labels import (
    equipment_label,
    equipment_list,
    lesson_description,
    product_type_label,
    resolve_locale,
)
from skirent.rental.models import LessonLevel, LessonType, ProductType
from skirent.rental.services.export import HEADER, build_bookings_workbook, export_filename


def product(type_, size=None):
    return SimpleNamespace(type=type_, size=size)


def lesson(**kwargs):
    data = dict(
        lesson_type=LessonType.SKI,
        level=LessonLevel.BEGINNER,
        number_of_people=2,
        duration=2,
    )
    data.update(kwargs)
    return SimpleNamespace(**data)


def test_equipment_label():
    assert equipment_label(product(ProductType.SKI_BOOTS, "42")) == "SKI BOOTS (42)"
    assert equipment_label(product(ProductType.SNOWBOARD)) == "SNOWBOARD"


def test_equipment_list():
    items = [product(ProductType.SKI), product(ProductType.ADULT_CLOTH, "L")]
    assert equipment_list(items) == "SKI, ADULT CLOTH (L)"
    assert equipment_list([]) == "—"


def test_lesson_description():
    assert lesson_description(lesson()) == "Ski Lesson (Beginner, 2 people, 2h)"
    assert (
        lesson_description(
            lesson(lesson_type=LessonType.SNOWBOARD, level=LessonLevel.EXPERT, number_of_people=1, duration=3)
        )
        == "Snowboard Lesson (Expert, 1 person, 3h)"
    )
    assert lesson_description(lesson(), with_duration=False) == "Ski Lesson (Beginner, 2 people)"


def test_locales():
    assert resolve_locale(None) == "en"
    assert resolve_locale("geo") == "geo"
    with pytest.raises(ValidationError):
        resolve_locale("de")


def test_product_type_label_localized():
    assert product_type_label(ProductType.HELMET) == "Helmet"
    assert product_type_label(ProductType.HELMET, "ru") == "Шлем"
    assert product_type_label("SKI", "geo") == "თხილამური"


def test_export_filename():
    assert export_filename(date(2026, 1, 5)) == "bookings_2026-01-05.xlsx"


def test_workbook_lists_bookings_then_lessons():
    booking = SimpleNamespace(
        first_name="Nino",
        last_name="Kapanadze",
        email="nino@example.com",
        phone_number="995555123456",
        personal_id="",
        products=[product(ProductType.SKI), product(ProductType.SKI_BOOTS, "40")],
        start_date=date(2026, 1, 10),
        end_date=date(2026, 1, 12),
        total_price=Decimal("210.00"),
    )
    teacher = SimpleNamespace(full_name="Giorgi Beridze")
    lesson_row = lesson(
        first_name="John",
        last_name="Smith",
        email="john@example.com",
        phone_number="447700900123",
        personal_id="P1",
        teacher=teacher,
        date=date(2026, 1, 11),
        total_price=Decimal("360.00"),
    )

    content = build_bookings_workbook([booking], [lesson_row])
    ws = openpyxl.load_workbook(io.BytesIO(content)).active

    assert ws.title == "Bookings"
    rows = list(ws.iter_rows(values_only=True))
    assert list(rows[0]) == HEADER
    assert ws["A1"].font.bold

    assert rows[1][:4] == ("Nino", "Kapanadze", "nino@example.com", "995555123456")
    assert rows[1][5] in (None, "")
    assert rows[1][6] == "SKI, SKI BOOTS (40)"
    assert rows[1][7:] == ("2026-01-10", "2026-01-12", 210)

    assert rows[2][5] == "Giorgi Beridze"
    assert rows[2][6] == "Ski Lesson (Beginner, 2 people, 2h)"
    assert rows[2][7] == rows[2][8] == "2026-01-11"
    assert rows[2][9] == 360
