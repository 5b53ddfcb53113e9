import math
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from skirent.core.database import get_session
from skirent.core.limits import limiter
from skirent.public.crud.catalog import get_product_by_id, get_products_paginated
from skirent.public.schemas.catalog import ProductListResponse, ProductRead
from skirent.rental.labels import product_type_label, resolve_locale
from skirent.rental.models import ProductType

router = APIRouter(prefix="/products", tags=["Catalog"])


def to_product_read(product, locale: str) -> ProductRead:
    item = ProductRead.model_validate(product)
    item.type_label = product_type_label(product.type, locale)
    return item


@router.get("", response_model=ProductListResponse)
@limiter.limit("60/minute")
async def list_products(
    request: Request,
    type: Optional[ProductType] = Query(None, description="Filter by equipment type"),
    locale: Optional[str] = Query(None, description="geo, en or ru"),
    page: int = Query(1, ge=1, description="Page number starting from 1"),
    size: int = Query(50, ge=1, le=100, description="Number of items per page"),
    db: AsyncSession = Depends(get_session),
):
    """
    Equipment catalog.

    - **type**: SKI, SNOWBOARD, SKI_BOOTS, ...
    - **locale**: language of ``type_label`` (default en)
    """
    locale = resolve_locale(locale)
    products, total = await get_products_paginated(
        db, skip=(page - 1) * size, limit=size, product_type=type
    )

    return ProductListResponse(
        items=[to_product_read(p, locale) for p in products],
        total=total,
        page=page,
        size=size,
        pages=math.ceil(total / size) if total > 0 else 1,
        locale=locale,
    )


@router.get("/{product_id}", response_model=ProductRead)
@limiter.limit("60/minute")
async def get_product(
    request: Request,
    product_id: int = Path(..., description="Product ID"),
    locale: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_session),
):
    product = await get_product_by_id(db, product_id)
    return to_product_read(product, resolve_locale(locale))
