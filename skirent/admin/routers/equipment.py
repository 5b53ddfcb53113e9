import math
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from skirent.admin.crud.equipment import (
    create_equipment,
    delete_equipment,
    get_equipment,
    get_equipment_paginated,
    update_equipment,
)
from skirent.admin.schemas.equipment import (
    EquipmentCreate,
    EquipmentListResponse,
    EquipmentRead,
    EquipmentUpdate,
)
from skirent.auth.core.dependencies import require_admin
from skirent.core.database import get_session
from skirent.core.limits import limiter
from skirent.rental.models import ProductType

router = APIRouter(
    prefix="/admin/equipment",
    tags=["Admin Equipment"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=EquipmentListResponse)
@limiter.limit("60/minute")
async def list_equipment(
    request: Request,
    type: Optional[ProductType] = Query(None, description="Filter by equipment type"),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
):
    items, total = await get_equipment_paginated(
        db, skip=(page - 1) * size, limit=size, product_type=type
    )
    return EquipmentListResponse(
        items=items,
        total=total,
        page=page,
        size=size,
        pages=math.ceil(total / size) if total > 0 else 1,
    )


@router.post("", response_model=EquipmentRead, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
async def add_equipment(
    request: Request,
    equipment_data: EquipmentCreate,
    db: AsyncSession = Depends(get_session),
):
    """
    Add a rentable product.

    - **price**: per day per person, GEL
    - **size**: kept only for boots, helmets and clothing
    - **images**: URLs returned by the upload service
    """
    return await create_equipment(db, equipment_data)


@router.get("/{product_id}", response_model=EquipmentRead)
@limiter.limit("60/minute")
async def get_equipment_item(
    request: Request,
    product_id: int = Path(..., description="Product ID"),
    db: AsyncSession = Depends(get_session),
):
    return await get_equipment(db, product_id)


@router.patch("/{product_id}", response_model=EquipmentRead)
@limiter.limit("30/minute")
async def patch_equipment(
    request: Request,
    equipment_update: EquipmentUpdate,
    product_id: int = Path(..., description="Product ID"),
    db: AsyncSession = Depends(get_session),
):
    return await update_equipment(db, product_id, equipment_update)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("10/minute")
async def remove_equipment(
    request: Request,
    product_id: int = Path(..., description="Product ID"),
    db: AsyncSession = Depends(get_session),
):
    """
    Delete a product. It is removed from the bookings that reference it.

    ⚠️ **Warning**: This action is irreversible.
    """
    await delete_equipment(db, product_id)
