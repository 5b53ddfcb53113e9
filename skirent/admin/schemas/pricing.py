from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict


class PriceListItem(BaseModel):
    item_key: str = Field(..., min_length=1, max_length=100)
    type: str = Field(..., min_length=1, max_length=100)
    includes: str = Field("", max_length=2000)
    price: str = Field(..., min_length=1, max_length=50)


class PriceListUpdate(BaseModel):
    items: List[PriceListItem] = Field(..., min_length=1)


class AdminPriceListRead(PriceListItem):
    id: int
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LessonPricingUpsert(BaseModel):
    """People/duration ranges are checked by the pricing service"""
    number_of_people: int
    duration: int
    price: float = Field(..., gt=0)


class LessonPricingRead(BaseModel):
    id: int
    number_of_people: int
    duration: int
    price: float

    model_config = ConfigDict(from_attributes=True)


class LessonPricingResponse(BaseModel):
    matrix: Dict[int, Dict[int, float]]
    items: List[LessonPricingRead]
