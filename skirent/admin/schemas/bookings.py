from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, ConfigDict, field_validator

from skirent.core.exceptions import ValidationError
from skirent.core.validations import clean_name, clean_phone_number
from skirent.public.schemas.bookings import ContactFields
from skirent.rental.labels import equipment_list
from skirent.rental.models import ProductType, ReservationStatus


class ProductBrief(BaseModel):
    id: int
    type: ProductType
    title: str
    price: float
    size: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AdminBookingCreate(ContactFields):
    """Booking entered from the back office (phone orders, walk-ins)"""
    personal_id: Optional[str] = Field(None, max_length=50)
    number_of_people: int = Field(1, ge=1, le=20)
    product_ids: List[int] = Field(..., min_length=1)
    start_date: date
    end_date: date
    total_price: Optional[float] = Field(None, ge=0)
    status: ReservationStatus = ReservationStatus.PENDING


class AdminBookingUpdate(BaseModel):
    """All fields optional; total is recalculated when omitted and pricing inputs change"""
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=30)
    email: Optional[EmailStr] = None
    personal_id: Optional[str] = Field(None, max_length=50)
    number_of_people: Optional[int] = Field(None, ge=1, le=20)
    product_ids: Optional[List[int]] = Field(None, min_length=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    total_price: Optional[float] = Field(None, ge=0)
    status: Optional[ReservationStatus] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, v, info):
        if v is None:
            return v
        try:
            return clean_name(v, info.field_name.replace("_", " ").capitalize())
        except ValidationError as e:
            raise ValueError(e.message)

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, v):
        if v is None:
            return v
        try:
            return clean_phone_number(v)
        except ValidationError as e:
            raise ValueError(e.message)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v):
        return v.lower() if v is not None else v

    @field_validator("start_date", "end_date")
    @classmethod
    def dates_not_null(cls, v):
        if v is None:
            raise ValueError("Date cannot be null")
        return v

    @field_validator("personal_id")
    @classmethod
    def strip_personal_id(cls, v):
        return v.strip() if v else ""


class AdminBookingRead(BaseModel):
    id: int
    first_name: str
    last_name: str
    customer: str
    email: str
    phone_number: str
    personal_id: str = ""
    number_of_people: Optional[int] = None
    start_date: date
    end_date: date
    status: ReservationStatus
    total_price: float
    products: List[ProductBrief] = Field(default_factory=list)
    equipment: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_booking(cls, booking) -> "AdminBookingRead":
        """Booking must have products loaded"""
        item = cls.model_validate(booking)
        item.equipment = equipment_list(booking.products)
        return item


class AdminBookingListResponse(BaseModel):
    items: List[AdminBookingRead]
    total: int
    page: int
    size: int
    pages: int
