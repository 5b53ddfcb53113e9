import io
from datetime import timedelta
from decimal import Decimal

import openpyxl
import pytest

from skirent.rental.models import ProductType, ReservationStatus
from skirent.rental.services.export import XLSX_MEDIA_TYPE

ADMIN = "/api/v1/admin"


# === Dashboard ===
async def test_overview(client, admin_headers, make_product, make_booking, make_lesson):
    ski = await make_product()
    await make_booking(products=[ski], status=ReservationStatus.CONFIRMED)
    await make_booking(status=ReservationStatus.CANCELLED, total_price=Decimal("50"))
    await make_lesson(status=ReservationStatus.COMPLETED)

    response = await client.get(f"{ADMIN}/overview", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["stats"] == {
        "total_bookings": 3,
        "active_rentals": 1,
        "total_revenue": 480.0,
        "total_products": 1,
    }
    assert len(body["bookings"]) == 3
    assert {item["type"] for item in body["bookings"]} == {"booking", "lesson"}
    lesson_item = next(i for i in body["bookings"] if i["type"] == "lesson")
    assert lesson_item["equipment"] == "Ski Lesson (Beginner, 2 people)"


async def test_customers_grouped_by_email(client, admin_headers, make_booking):
    await make_booking(total_price=Decimal("100"))
    await make_booking(total_price=Decimal("140"), phone_number="995599000111")
    await make_booking(email="other@example.com", first_name="Other")

    body = (await client.get(f"{ADMIN}/customers", headers=admin_headers)).json()

    assert body["total"] == 2
    nino = next(c for c in body["items"] if c["email"] == "nino@example.com")
    assert nino["bookings_count"] == 2
    assert nino["total_spent"] == 240.0


async def test_reports(client, admin_headers, make_product, make_booking):
    ski = await make_product(title="Popular")
    boots = await make_product(type=ProductType.SKI_BOOTS, title="Rare", size="42")
    await make_booking(products=[ski], status=ReservationStatus.CONFIRMED)
    await make_booking(
        products=[ski, boots], status=ReservationStatus.COMPLETED, total_price=Decimal("80")
    )
    await make_booking(status=ReservationStatus.PENDING)

    response = await client.get(f"{ADMIN}/reports", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["revenue"] == {"total": 200.0, "confirmed": 120.0}
    assert body["bookings"]["total"] == 3
    assert {s["status"]: s["count"] for s in body["bookings"]["by_status"]} == {
        "PENDING": 1,
        "CONFIRMED": 1,
        "COMPLETED": 1,
    }
    assert sum(m["count"] for m in body["bookings"]["by_month"]) == 3
    assert [p["title"] for p in body["top_products"]] == ["Popular", "Rare"]
    assert body["top_products"][0]["bookings_count"] == 2


async def test_reports_rejects_inverted_range(client, admin_headers):
    response = await client.get(
        f"{ADMIN}/reports",
        params={"start_date": "2026-02-01", "end_date": "2026-01-01"},
        headers=admin_headers,
    )

    assert response.status_code == 400


# === Guests calendar ===
async def test_guests_calendar_range(client, admin_headers, tomorrow, make_booking, make_lesson):
    await make_booking(number_of_people=2)
    await make_booking(number_of_people=5, status=ReservationStatus.CANCELLED)
    await make_lesson()

    response = await client.get(
        f"{ADMIN}/guests-calendar",
        params={
            "date_from": tomorrow.isoformat(),
            "date_to": (tomorrow + timedelta(days=3)).isoformat(),
        },
        headers=admin_headers,
    )

    assert response.status_code == 200
    dates = response.json()["dates"]
    assert list(dates.values()) == [4, 2, 2, 0]


async def test_guests_calendar_month(client, admin_headers):
    response = await client.get(
        f"{ADMIN}/guests-calendar", params={"year": 2026, "month": 2}, headers=admin_headers
    )

    body = response.json()
    assert body["date_from"] == "2026-02-01"
    assert body["date_to"] == "2026-02-28"
    assert len(body["dates"]) == 28


@pytest.mark.parametrize(
    "params",
    [{"year": 2026, "month": 0}, {"year": 2026, "month": 13}, {"year": 0, "month": 5}],
)
async def test_guests_calendar_invalid_month(client, admin_headers, params):
    response = await client.get(
        f"{ADMIN}/guests-calendar", params=params, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid year or month"


async def test_guests_calendar_limits(client, admin_headers, tomorrow):
    response = await client.get(
        f"{ADMIN}/guests-calendar",
        params={
            "date_from": tomorrow.isoformat(),
            "date_to": (tomorrow + timedelta(days=93)).isoformat(),
        },
        headers=admin_headers,
    )
    assert response.status_code == 400

    response = await client.get(
        f"{ADMIN}/guests-calendar",
        params={"date_from": tomorrow.isoformat()},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Both date_from and date_to are required"


async def test_guests_day(client, admin_headers, tomorrow, make_booking, make_lesson):
    await make_booking(number_of_people=None)
    await make_lesson(number_of_people=3, participants=[])

    response = await client.get(
        f"{ADMIN}/guests-calendar/day",
        params={"date": tomorrow.isoformat()},
        headers=admin_headers,
    )

    assert response.status_code == 200
    summary = response.json()["summary"]
    assert summary == {
        "total_guests": 4,
        "booking_guests": 1,
        "lesson_guests": 3,
        "bookings_count": 1,
        "lessons_count": 1,
    }


async def test_guests_day_requires_date(client, admin_headers):
    response = await client.get(f"{ADMIN}/guests-calendar/day", headers=admin_headers)
    assert response.status_code == 400


# === Bookings ===
def admin_booking_payload(product_ids, start, end, **kwargs):
    data = {
        "first_name": "Tamar",
        "last_name": "Gelashvili",
        "phone_number": "+995 599 11 22 33",
        "email": "tamar@example.com",
        "number_of_people": 2,
        "product_ids": product_ids,
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
    }
    data.update(kwargs)
    return data


async def test_admin_create_booking(client, admin_headers, make_product, today):
    ski = await make_product(price=Decimal("40"))

    # no two-week cap and past dates are allowed from the back office
    response = await client.post(
        f"{ADMIN}/bookings",
        json=admin_booking_payload([ski.id], today - timedelta(days=20), today),
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json()["total_price"] == 40.0 * 21 * 2

    response = await client.post(
        f"{ADMIN}/bookings",
        json=admin_booking_payload(
            [ski.id], today, today, total_price=99.5, status="CONFIRMED"
        ),
        headers=admin_headers,
    )
    body = response.json()
    assert body["total_price"] == 99.5
    assert body["status"] == "CONFIRMED"
    assert body["equipment"] == "SKI"


async def test_admin_list_bookings_by_status(client, admin_headers, make_booking):
    await make_booking()
    await make_booking(status=ReservationStatus.CONFIRMED)

    body = (
        await client.get(
            f"{ADMIN}/bookings", params={"status": "CONFIRMED"}, headers=admin_headers
        )
    ).json()

    assert body["total"] == 1
    assert body["items"][0]["status"] == "CONFIRMED"


async def test_admin_booking_status_lifecycle(client, admin_headers, make_booking):
    booking = await make_booking()
    url = f"{ADMIN}/bookings/{booking.id}"

    response = await client.patch(url, json={"status": "CONFIRMED"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "CONFIRMED"

    response = await client.patch(url, json={"status": "PENDING"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["details"] == {
        "resource": "booking",
        "current": "CONFIRMED",
        "requested": "PENDING",
    }

    response = await client.patch(url, json={"status": "COMPLETED"}, headers=admin_headers)
    assert response.json()["status"] == "COMPLETED"


async def test_admin_booking_update_recalculates_total(
    client, admin_headers, make_product, make_booking
):
    ski = await make_product(price=Decimal("40"))
    booking = await make_booking(products=[ski])
    url = f"{ADMIN}/bookings/{booking.id}"

    response = await client.patch(url, json={"number_of_people": 2}, headers=admin_headers)
    assert response.json()["total_price"] == 240.0

    response = await client.patch(url, json={"total_price": 200}, headers=admin_headers)
    assert response.json()["total_price"] == 200.0

    response = await client.patch(url, json={"first_name": "Nina"}, headers=admin_headers)
    assert response.json()["total_price"] == 200.0
    assert response.json()["customer"] == "Nina Kapanadze"


async def test_admin_booking_update_validation(client, admin_headers, make_booking):
    booking = await make_booking()
    url = f"{ADMIN}/bookings/{booking.id}"

    response = await client.patch(url, json={}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "No fields to update"

    response = await client.patch(
        url,
        json={"end_date": (booking.start_date - timedelta(days=1)).isoformat()},
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.parametrize("field", ["start_date", "end_date"])
async def test_admin_booking_update_rejects_null_dates(
    client, admin_headers, make_booking, field
):
    booking = await make_booking()

    response = await client.patch(
        f"{ADMIN}/bookings/{booking.id}", json={field: None}, headers=admin_headers
    )

    assert response.status_code == 422

    body = (await client.get(f"{ADMIN}/bookings/{booking.id}", headers=admin_headers)).json()
    assert body[field] == getattr(booking, field).isoformat()


async def test_admin_booking_update_clears_personal_id(client, admin_headers, make_booking):
    booking = await make_booking()

    response = await client.patch(
        f"{ADMIN}/bookings/{booking.id}", json={"personal_id": None}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["personal_id"] == ""
    assert response.json()["total_price"] == 120.0


async def test_admin_delete_booking(client, admin_headers, make_product, make_booking):
    ski = await make_product()
    booking = await make_booking(products=[ski])

    response = await client.delete(f"{ADMIN}/bookings/{booking.id}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.get(f"{ADMIN}/bookings/{booking.id}", headers=admin_headers)
    assert response.status_code == 404

    # the product itself survives
    response = await client.get(f"/api/v1/products/{ski.id}")
    assert response.status_code == 200


async def test_export_bookings(
    client, admin_headers, make_product, make_booking, make_lesson, make_teacher
):
    ski = await make_product()
    teacher = await make_teacher()
    await make_booking(products=[ski])
    await make_lesson(teacher_id=teacher.id)

    response = await client.get(f"{ADMIN}/bookings/export", headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == XLSX_MEDIA_TYPE
    assert "attachment; filename=\"bookings_" in response.headers["content-disposition"]

    sheet = openpyxl.load_workbook(io.BytesIO(response.content)).active
    rows = list(sheet.iter_rows(values_only=True))
    assert len(rows) == 3
    assert rows[1][6] == "SKI"
    assert rows[2][5] == "Giorgi Beridze"


# === Lessons ===
async def test_admin_list_lessons_filters(client, admin_headers, make_lesson):
    await make_lesson()
    await make_lesson(status=ReservationStatus.CANCELLED)

    body = (
        await client.get(f"{ADMIN}/lessons", params={"status": "all"}, headers=admin_headers)
    ).json()
    assert body["total"] == 2

    body = (
        await client.get(
            f"{ADMIN}/lessons", params={"status": "cancelled"}, headers=admin_headers
        )
    ).json()
    assert body["total"] == 1

    response = await client.get(
        f"{ADMIN}/lessons", params={"status": "bogus"}, headers=admin_headers
    )
    assert response.status_code == 400


async def test_admin_assign_and_clear_teacher(client, admin_headers, make_lesson, make_teacher):
    lesson = await make_lesson()
    teacher = await make_teacher()
    url = f"{ADMIN}/lessons/{lesson.id}"

    response = await client.patch(url, json={"teacher_id": teacher.id}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["teacher"]["firstname"] == "Giorgi"

    response = await client.patch(
        url, json={"status": "CONFIRMED"}, headers=admin_headers
    )
    assert response.json()["teacher_id"] == teacher.id
    assert response.json()["status"] == "CONFIRMED"

    response = await client.patch(url, json={"teacher_id": None}, headers=admin_headers)
    assert response.json()["teacher_id"] is None
    assert response.json()["teacher"] is None


async def test_admin_lesson_update_errors(client, admin_headers, make_lesson):
    lesson = await make_lesson()
    url = f"{ADMIN}/lessons/{lesson.id}"

    response = await client.patch(url, json={"teacher_id": 999}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid teacher"

    response = await client.patch(url, json={"status": "COMPLETED"}, headers=admin_headers)
    assert response.status_code == 400

    response = await client.patch(url, json={}, headers=admin_headers)
    assert response.status_code == 400

    response = await client.patch(
        f"{ADMIN}/lessons/999", json={"status": "CONFIRMED"}, headers=admin_headers
    )
    assert response.status_code == 404


async def test_admin_delete_lesson(client, admin_headers, make_lesson):
    lesson = await make_lesson()

    response = await client.delete(f"{ADMIN}/lessons/{lesson.id}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.get(f"{ADMIN}/lessons/{lesson.id}", headers=admin_headers)
    assert response.status_code == 404


# === Equipment ===
async def test_equipment_crud(client, admin_headers):
    response = await client.post(
        f"{ADMIN}/equipment",
        json={"type": "SKI", "title": "  Atomic Redster ", "price": 60, "size": "170"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    ski = response.json()
    assert ski["title"] == "Atomic Redster"
    assert ski["size"] is None
    assert ski["bookings_count"] == 0

    response = await client.post(
        f"{ADMIN}/equipment",
        json={"type": "SKI_BOOTS", "title": "Salomon", "price": 30, "size": "43"},
        headers=admin_headers,
    )
    assert response.json()["size"] == "43"

    response = await client.patch(
        f"{ADMIN}/equipment/{ski['id']}", json={"price": 65.5}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["price"] == 65.5

    body = (await client.get(f"{ADMIN}/equipment", headers=admin_headers)).json()
    assert body["total"] == 2

    response = await client.delete(f"{ADMIN}/equipment/{ski['id']}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.get(f"{ADMIN}/equipment/{ski['id']}", headers=admin_headers)
    assert response.status_code == 404


async def test_equipment_bookings_count_and_delete(
    client, admin_headers, make_product, make_booking
):
    ski = await make_product()
    booking = await make_booking(products=[ski])

    body = (await client.get(f"{ADMIN}/equipment/{ski.id}", headers=admin_headers)).json()
    assert body["bookings_count"] == 1

    response = await client.delete(f"{ADMIN}/equipment/{ski.id}", headers=admin_headers)
    assert response.status_code == 204

    # booking stays, just without the product
    body = (await client.get(f"{ADMIN}/bookings/{booking.id}", headers=admin_headers)).json()
    assert body["products"] == []
    assert body["equipment"] == "—"


async def test_equipment_validation(client, admin_headers):
    response = await client.post(
        f"{ADMIN}/equipment",
        json={"type": "SLED", "title": "Sled", "price": 10},
        headers=admin_headers,
    )
    assert response.status_code == 422

    response = await client.post(
        f"{ADMIN}/equipment",
        json={"type": "SKI", "title": "Ski", "price": -1},
        headers=admin_headers,
    )
    assert response.status_code == 422


# === Teachers ===
async def test_teacher_crud(client, admin_headers):
    response = await client.post(
        f"{ADMIN}/teachers", json={"firstname": " Levan ", "lastname": "Kiknadze"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    teacher = response.json()
    assert teacher["firstname"] == "Levan"
    assert teacher["lessons_count"] == 0

    response = await client.patch(
        f"{ADMIN}/teachers/{teacher['id']}", json={"lastname": "Kiknadze-Jr"},
        headers=admin_headers,
    )
    assert response.json()["lastname"] == "Kiknadze-Jr"

    response = await client.patch(
        f"{ADMIN}/teachers/{teacher['id']}", json={}, headers=admin_headers
    )
    assert response.status_code == 400

    response = await client.post(
        f"{ADMIN}/teachers", json={"firstname": "", "lastname": "X"}, headers=admin_headers
    )
    assert response.status_code == 422


async def test_delete_teacher_unassigns_lessons(
    client, admin_headers, make_teacher, make_lesson
):
    teacher = await make_teacher()
    lesson = await make_lesson(teacher_id=teacher.id)

    teachers = (await client.get(f"{ADMIN}/teachers", headers=admin_headers)).json()
    assert teachers[0]["lessons_count"] == 1

    response = await client.delete(f"{ADMIN}/teachers/{teacher.id}", headers=admin_headers)
    assert response.status_code == 204

    body = (await client.get(f"{ADMIN}/lessons/{lesson.id}", headers=admin_headers)).json()
    assert body["teacher_id"] is None

    response = await client.delete(f"{ADMIN}/teachers/{teacher.id}", headers=admin_headers)
    assert response.status_code == 404


# === Pricing ===
async def test_price_list_upsert(client, admin_headers):
    items = [
        {"item_key": "ski_boots", "type": "Ski boots", "includes": "Boots", "price": "30 ₾"},
        {"item_key": "helmet", "type": "Helmet", "price": "10 ₾"},
    ]
    response = await client.put(
        f"{ADMIN}/prices", json={"items": items}, headers=admin_headers
    )
    assert response.status_code == 200
    assert len(response.json()) == 2

    items[0]["price"] = "35 ₾"
    response = await client.put(
        f"{ADMIN}/prices", json={"items": items[:1]}, headers=admin_headers
    )
    rows = {row["item_key"]: row for row in response.json()}
    assert len(rows) == 2
    assert rows["ski_boots"]["price"] == "35 ₾"

    response = await client.put(f"{ADMIN}/prices", json={"items": []}, headers=admin_headers)
    assert response.status_code == 422


async def test_lesson_pricing_upsert_and_delete(client, admin_headers):
    url = f"{ADMIN}/lesson-pricing"

    response = await client.post(
        url, json={"number_of_people": 1, "duration": 1, "price": 150}, headers=admin_headers
    )
    assert response.status_code == 200
    first = response.json()

    response = await client.post(
        url, json={"number_of_people": 1, "duration": 1, "price": 160}, headers=admin_headers
    )
    assert response.json()["id"] == first["id"]
    assert response.json()["price"] == 160.0

    body = (await client.get(url, headers=admin_headers)).json()
    assert body["matrix"] == {"1": {"1": 160.0}}
    assert len(body["items"]) == 1

    # the public matrix follows the configured rows
    public = (await client.get("/api/v1/lessons/pricing")).json()
    assert public["pricing"] == {"1": {"1": 160.0}}

    response = await client.post(
        url, json={"number_of_people": 5, "duration": 1, "price": 100}, headers=admin_headers
    )
    assert response.status_code == 400

    response = await client.delete(f"{url}/{first['id']}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.delete(f"{url}/{first['id']}", headers=admin_headers)
    assert response.status_code == 404
