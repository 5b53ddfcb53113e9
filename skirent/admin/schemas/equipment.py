from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from skirent.rental.models import ProductType


class EquipmentBase(BaseModel):
    type: ProductType
    title: str = Field(..., min_length=1, max_length=200)
    price: float = Field(..., ge=0, description="Price per day per person, GEL")
    size: Optional[str] = Field(None, max_length=50)
    standard: bool = False
    professional: bool = False
    images: List[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v

    @field_validator("size")
    @classmethod
    def strip_size(cls, v):
        if v is None:
            return v
        return v.strip() or None


class EquipmentCreate(EquipmentBase):
    pass


class EquipmentUpdate(BaseModel):
    type: Optional[ProductType] = None
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    price: Optional[float] = Field(None, ge=0)
    size: Optional[str] = Field(None, max_length=50)
    standard: Optional[bool] = None
    professional: Optional[bool] = None
    images: Optional[List[str]] = None


class EquipmentRead(EquipmentBase):
    id: int
    bookings_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class EquipmentListResponse(BaseModel):
    items: List[EquipmentRead]
    total: int
    page: int
    size: int
    pages: int
