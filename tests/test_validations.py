from datetime import date

import pytest
from pydantic import ValidationError as PydanticValidationError

from skirent.core.exceptions import ValidationError
from skirent.core.validations import clean_name, clean_phone_number, parse_iso_date
from skirent.public.schemas.bookings import ContactFields


def contact(**kwargs):
    data = {
        "first_name": "Nino",
        "last_name": "Kapanadze",
        "phone_number": "+995 555 12 34 56",
        "email": "nino@example.com",
    }
    data.update(kwargs)
    return ContactFields(**data)


def test_phone_number_keeps_digits():
    assert clean_phone_number("+995 (555) 12-34-56") == "995555123456"


@pytest.mark.parametrize("phone", ["", "   ", "abc", "12345", "0555123456", "1" * 21])
def test_phone_number_rejected(phone):
    with pytest.raises(ValidationError):
        clean_phone_number(phone)


def test_email_is_lowercased():
    assert contact(email="Nino@Example.COM").email == "nino@example.com"


@pytest.mark.parametrize("email", ["", "nino", "nino@", "nino@example", "a b@example.com"])
def test_email_rejected(email):
    with pytest.raises(PydanticValidationError) as exc:
        contact(email=email)
    assert exc.value.errors()[0]["loc"] == ("email",)


def test_clean_name_collapses_spaces():
    assert clean_name("  Anna   Maria ") == "Anna Maria"
    with pytest.raises(ValidationError) as exc:
        clean_name("  ", "First name")
    assert exc.value.message == "First name is required"


def test_parse_iso_date():
    assert parse_iso_date("2026-01-31") == date(2026, 1, 31)

    with pytest.raises(ValidationError) as exc:
        parse_iso_date("31.01.2026", "date")
    assert exc.value.message == "Invalid or missing date (expected YYYY-MM-DD)"

    with pytest.raises(ValidationError) as exc:
        parse_iso_date("2026-02-30", "date")
    assert exc.value.message == "Invalid date"
