import re
from datetime import date

from skirent.core.exceptions import ValidationError

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def clean_phone_number(phone: str) -> str:
    """
    Normalize a phone number entered through the international phone widget.
    Returns digits only, without '+' and separators.
    """
    if not phone or not phone.strip():
        raise ValidationError("Phone number cannot be empty")

    clean_phone = re.sub(r"\D", "", phone)

    if not clean_phone:
        raise ValidationError("Phone number must contain digits")

    if len(clean_phone) < 7 or len(clean_phone) > 20:
        raise ValidationError("Phone number must be between 7 and 20 digits")

    if clean_phone.startswith("0"):
        raise ValidationError("Phone number cannot start with 0")

    return clean_phone


def clean_name(value: str, field: str = "Name") -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return re.sub(r"\s+", " ", str(value).strip())


def parse_iso_date(value: str, field: str = "date") -> date:
    """Parse a strict YYYY-MM-DD query parameter"""
    if not value or not ISO_DATE_PATTERN.match(value):
        raise ValidationError(f"Invalid or missing {field} (expected YYYY-MM-DD)")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid {field}")
