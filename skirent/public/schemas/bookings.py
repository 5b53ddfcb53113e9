from datetime import date
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from skirent.core.exceptions import ValidationError
from skirent.core.validations import clean_name, clean_phone_number
from skirent.rental.models import ReservationStatus


class ContactFields(BaseModel):
    """Customer contact block shared by booking and lesson forms"""
    first_name: str = Field(..., max_length=100)
    last_name: str = Field(..., max_length=100)
    phone_number: str = Field(..., max_length=30)
    email: EmailStr

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, v, info):
        try:
            return clean_name(v, info.field_name.replace("_", " ").capitalize())
        except ValidationError as e:
            raise ValueError(e.message)

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, v):
        try:
            return clean_phone_number(v)
        except ValidationError as e:
            raise ValueError(e.message)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v):
        return v.lower()


class BookingCreate(ContactFields):
    """
    Equipment rental request from the booking page.

    ``product_id`` is the single-product form of older clients; it is merged
    into ``product_ids``. A client-side ``total_price`` is accepted but ignored.
    """
    personal_id: Optional[str] = Field(None, max_length=50)
    number_of_people: int = Field(1, ge=1, le=20)
    product_ids: List[int] = Field(default_factory=list)
    product_id: Optional[int] = Field(None, gt=0)
    start_date: date
    end_date: date
    total_price: Optional[float] = None

    @field_validator("personal_id")
    @classmethod
    def strip_personal_id(cls, v):
        return v.strip() if v else ""

    @model_validator(mode="after")
    def merge_product_ids(self):
        ids = list(self.product_ids)
        if self.product_id is not None and self.product_id not in ids:
            ids.append(self.product_id)
        # Порядок сохраняем, дубликаты убираем
        self.product_ids = list(dict.fromkeys(ids))
        if not self.product_ids:
            raise ValueError("At least one product is required")
        return self


class BookingSummary(BaseModel):
    id: int
    customer: str
    equipment: str
    start_date: date
    end_date: date
    number_of_people: Optional[int] = None
    total_price: float
    status: ReservationStatus


class BookingCreatedResponse(BaseModel):
    id: int
    message: str
    booking: BookingSummary
