from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from skirent.rental.models import ProductType


class ProductRead(BaseModel):
    """Rentable equipment item as shown in the catalog"""
    id: int
    type: ProductType
    type_label: Optional[str] = None
    title: str
    price: float
    size: Optional[str] = None
    standard: bool = False
    professional: bool = False
    images: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProductListResponse(BaseModel):
    items: List[ProductRead]
    total: int
    page: int
    size: int
    pages: int
    locale: str


class PriceListRead(BaseModel):
    id: int
    item_key: str
    type: str
    includes: str
    price: str

    model_config = ConfigDict(from_attributes=True)


class TeacherRead(BaseModel):
    id: int
    firstname: str
    lastname: str

    model_config = ConfigDict(from_attributes=True)


class LessonPricingMatrix(BaseModel):
    """``pricing[people][duration]`` in GEL"""
    pricing: Dict[int, Dict[int, float]]
    currency: str


class LocalesResponse(BaseModel):
    locales: List[str]
    default: str
