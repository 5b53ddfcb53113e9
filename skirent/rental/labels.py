"""Human-readable labels for equipment and lessons (admin strings are English)"""
from typing import Iterable, Optional

from skirent.core.config import SUPPORTED_LOCALES, DEFAULT_LOCALE
from skirent.core.exceptions import ValidationError

EMPTY_EQUIPMENT = "—"

PRODUCT_TYPE_LABELS = {
    "en": {
        "SKI": "Ski",
        "SNOWBOARD": "Snowboard",
        "SKI_BOOTS": "Ski boots",
        "SNOWBOARD_BOOTS": "Snowboard boots",
        "HELMET": "Helmet",
        "GOGGLES": "Goggles",
        "ADULT_CLOTH": "Adult clothing",
        "CHILD_CLOTH": "Kids clothing",
        "OTHER": "Accessories",
    },
    "ru": {
        "SKI": "Лыжи",
        "SNOWBOARD": "Сноуборд",
        "SKI_BOOTS": "Лыжные ботинки",
        "SNOWBOARD_BOOTS": "Ботинки для сноуборда",
        "HELMET": "Шлем",
        "GOGGLES": "Маска",
        "ADULT_CLOTH": "Одежда для взрослых",
        "CHILD_CLOTH": "Детская одежда",
        "OTHER": "Аксессуары",
    },
    "geo": {
        "SKI": "თხილამური",
        "SNOWBOARD": "სნოუბორდი",
        "SKI_BOOTS": "თხილამურის ფეხსაცმელი",
        "SNOWBOARD_BOOTS": "სნოუბორდის ფეხსაცმელი",
        "HELMET": "ჩაფხუტი",
        "GOGGLES": "სათვალე",
        "ADULT_CLOTH": "ზრდასრულის ტანსაცმელი",
        "CHILD_CLOTH": "ბავშვის ტანსაცმელი",
        "OTHER": "აქსესუარები",
    },
}

LESSON_TYPE_LABELS = {"SKI": "Ski", "SNOWBOARD": "Snowboard"}
LEVEL_LABELS = {
    "BEGINNER": "Beginner",
    "INTERMEDIATE": "Intermediate",
    "EXPERT": "Expert",
}


def _value(enum_or_str) -> str:
    return getattr(enum_or_str, "value", enum_or_str)


def resolve_locale(locale: Optional[str]) -> str:
    if not locale:
        return DEFAULT_LOCALE
    if locale not in SUPPORTED_LOCALES:
        raise ValidationError(
            f"Unsupported locale '{locale}'",
            {"supported": list(SUPPORTED_LOCALES)},
        )
    return locale


def product_type_label(product_type, locale: Optional[str] = None) -> str:
    labels = PRODUCT_TYPE_LABELS[resolve_locale(locale)]
    key = _value(product_type)
    return labels.get(key, key.replace("_", " "))


def equipment_label(product) -> str:
    """ADULT_CLOTH (L) style label used in the back office"""
    label = _value(product.type).replace("_", " ")
    if product.size:
        label += f" ({product.size})"
    return label


def equipment_list(products: Iterable) -> str:
    return ", ".join(equipment_label(p) for p in products) or EMPTY_EQUIPMENT


def people_label(count: int) -> str:
    return f"{count} {'person' if count == 1 else 'people'}"


def lesson_description(lesson, with_duration: bool = True) -> str:
    """e.g. 'Ski Lesson (Beginner, 2 people, 2h)'"""
    kind = LESSON_TYPE_LABELS.get(_value(lesson.lesson_type), "Snowboard")
    level = LEVEL_LABELS.get(_value(lesson.level), "Expert")
    parts = [level, people_label(lesson.number_of_people)]
    if with_duration:
        parts.append(f"{lesson.duration}h")
    return f"{kind} Lesson ({', '.join(parts)})"
