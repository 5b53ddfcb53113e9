"""Spreadsheet export of bookings and lessons for the back office"""
import io
from datetime import date
from typing import Iterable, List, Optional

import openpyxl
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from skirent.rental.labels import equipment_list, lesson_description

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

HEADER = [
    "First Name",
    "Last Name",
    "Email",
    "Phone",
    "Personal ID",
    "Teacher",
    "Equipment",
    "Start Date",
    "End Date",
    "Total Price",
]


def export_filename(today: Optional[date] = None) -> str:
    return f"bookings_{(today or date.today()).isoformat()}.xlsx"


def booking_row(booking) -> List:
    return [
        booking.first_name,
        booking.last_name,
        booking.email,
        booking.phone_number,
        booking.personal_id or "",
        "",
        equipment_list(booking.products),
        booking.start_date.isoformat(),
        booking.end_date.isoformat(),
        float(booking.total_price),
    ]


def lesson_row(lesson) -> List:
    teacher = lesson.teacher.full_name if lesson.teacher else ""
    return [
        lesson.first_name,
        lesson.last_name,
        lesson.email,
        lesson.phone_number,
        lesson.personal_id or "",
        teacher,
        lesson_description(lesson),
        lesson.date.isoformat(),
        lesson.date.isoformat(),
        float(lesson.total_price),
    ]


def build_bookings_workbook(bookings: Iterable, lessons: Iterable) -> bytes:
    """
    Bookings first, then lessons, on a single "Bookings" sheet.

    Bookings must have ``products`` and lessons ``teacher`` loaded.
    """
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Bookings"

    ws.append(HEADER)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for booking in bookings:
        ws.append(booking_row(booking))
    for lesson in lessons:
        ws.append(lesson_row(lesson))

    for index, title in enumerate(HEADER, start=1):
        column = get_column_letter(index)
        width = max(
            (len(str(cell.value)) for cell in ws[column] if cell.value is not None),
            default=len(title),
        )
        ws.column_dimensions[column].width = min(width + 2, 60)

    stream = io.BytesIO()
    wb.save(stream)
    return stream.getvalue()
