from skirent.core.database import Base
from .status import ReservationStatus, REVENUE_STATUSES, ACTIVE_STATUSES
from .products import Product, ProductType, SIZED_PRODUCT_TYPES, booking_products
from .bookings import Booking
from .teachers import Teacher
from .lessons import Lesson, LessonType, LessonLevel
from .pricing import PriceList, LessonPricing

__all__ = [
    "Base",
    "ReservationStatus",
    "REVENUE_STATUSES",
    "ACTIVE_STATUSES",
    "Product",
    "ProductType",
    "SIZED_PRODUCT_TYPES",
    "booking_products",
    "Booking",
    "Teacher",
    "Lesson",
    "LessonType",
    "LessonLevel",
    "PriceList",
    "LessonPricing",
]
