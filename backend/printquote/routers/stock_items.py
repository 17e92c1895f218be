"""Stock (filament roll) endpoints."""
from typing import Sequence

from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import apply_patch, get_db_session, get_in_scope, get_policy
from ..errors import Conflict, InvalidInput
from ..models import Material, StockItem
from ..policy import AccessPolicy, EntityKind, Operation
from ..schemas import OkResponse, StockItemCreate, StockItemRead, StockItemUpdate

router = APIRouter(prefix="/api/stock-items", tags=["stock"])


async def _ensure_material(session: AsyncSession, owner_id: str, material_id: str) -> None:
    found = await session.scalar(
        select(Material.id).where(Material.id == material_id, Material.owner_id == owner_id)
    )
    if found is None:
        raise InvalidInput("Unknown material")


async def _ensure_unique_roll(
    session: AsyncSession,
    owner_id: str,
    material_id: str,
    brand: str,
    color: str,
    exclude_id: str | None = None,
) -> None:
    """One row per (material, brand, colour); colour compared case-insensitively."""

    query = select(StockItem.id).where(
        StockItem.owner_id == owner_id,
        StockItem.material_id == material_id,
        StockItem.brand == brand,
        func.lower(StockItem.color) == color.lower(),
    )
    if exclude_id is not None:
        query = query.where(StockItem.id != exclude_id)
    if await session.scalar(query) is not None:
        raise Conflict("This material, brand and colour is already in stock")


@router.get("", response_model=list[StockItemRead])
async def list_stock_items(
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[StockItem]:
    scope = policy.scope(EntityKind.STOCK_ITEM, Operation.READ)
    result = await session.execute(
        select(StockItem)
        .where(scope.clause(StockItem))
        .order_by(StockItem.brand, StockItem.color)
    )
    return list(result.scalars().all())


@router.post("", response_model=StockItemRead, status_code=status.HTTP_201_CREATED)
async def create_stock_item(
    payload: StockItemCreate,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> StockItem:
    policy.scope(EntityKind.STOCK_ITEM, Operation.CREATE)
    owner_id = policy.principal.user_id
    await _ensure_material(session, owner_id, payload.material_id)
    await _ensure_unique_roll(session, owner_id, payload.material_id, payload.brand, payload.color)

    item = StockItem(owner_id=owner_id, **payload.model_dump())
    session.add(item)
    await session.commit()
    await session.refresh(item)
    return item


@router.patch("/{item_id}", response_model=StockItemRead)
async def update_stock_item(
    item_id: str,
    payload: StockItemUpdate,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> StockItem:
    scope = policy.scope(EntityKind.STOCK_ITEM, Operation.MODIFY)
    item = await get_in_scope(session, StockItem, item_id, scope)

    material_id = payload.material_id if payload.material_id is not None else item.material_id
    brand = payload.brand if payload.brand is not None else item.brand
    color = payload.color if payload.color is not None else item.color
    if payload.material_id is not None and payload.material_id != item.material_id:
        await _ensure_material(session, item.owner_id, material_id)
    await _ensure_unique_roll(session, item.owner_id, material_id, brand, color, exclude_id=item.id)

    apply_patch(item, payload)
    await session.commit()
    await session.refresh(item)
    return item


@router.delete("/{item_id}", response_model=OkResponse)
async def delete_stock_item(
    item_id: str,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> OkResponse:
    scope = policy.scope(EntityKind.STOCK_ITEM, Operation.MODIFY)
    item = await get_in_scope(session, StockItem, item_id, scope)
    await session.delete(item)
    await session.commit()
    return OkResponse()
