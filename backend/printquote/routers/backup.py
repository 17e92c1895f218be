"""JSON backup import and export of the caller's data."""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..context import AppContext
from ..dependencies import apply_patch, get_context, get_db_session, get_policy, require_admin
from ..models import Calculation, Client, Material, StockItem
from ..policy import AccessPolicy
from ..schemas import (
    BackupExport,
    BackupImport,
    CalculationRead,
    ClientRead,
    MaterialRead,
    OkResponse,
    SettingsRead,
    StockItemRead,
)
from ..services.accounts import get_or_create_settings

logger = logging.getLogger("printquote.backup")

router = APIRouter(prefix="/api/backup", tags=["backup"])


@router.post("/import", response_model=OkResponse)
async def import_backup(
    payload: BackupImport,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> OkResponse:
    """Restore a backup in one transaction.

    Clients are appended; materials, stock items and quotes replace the
    caller's rows; settings are merged field by field. Imported stock items
    that point at an imported material's old id are re-pointed to its new id.
    """

    require_admin(policy.principal)
    owner_id = policy.principal.user_id

    if payload.clients is not None:
        for item in payload.clients:
            data = item.model_dump()
            data["email"] = data["email"] or ""
            session.add(Client(owner_id=owner_id, **data))

    material_ids: dict[str, str] = {}
    if payload.materials is not None:
        await session.execute(delete(Material).where(Material.owner_id == owner_id))
        for item in payload.materials:
            material = Material(owner_id=owner_id, name=item.name, cost_per_kg=item.cost_per_kg)
            session.add(material)
            await session.flush()
            if item.id:
                material_ids[item.id] = material.id

    if payload.stock_items is not None:
        await session.execute(delete(StockItem).where(StockItem.owner_id == owner_id))
        for item in payload.stock_items:
            data = item.model_dump()
            data["material_id"] = material_ids.get(item.material_id, item.material_id)
            session.add(StockItem(owner_id=owner_id, **data))

    if payload.calculations is not None:
        await session.execute(delete(Calculation).where(Calculation.owner_id == owner_id))
        for item in payload.calculations:
            data = item.model_dump()
            data["date"] = item.date or context.clock()
            data["details"] = item.details or {}
            session.add(Calculation(owner_id=owner_id, **data))

    if payload.settings is not None:
        row = await get_or_create_settings(session, owner_id)
        apply_patch(row, payload.settings)

    await session.commit()
    logger.info("Backup imported for %s", policy.principal.username)
    return OkResponse()


@router.get("/export", response_model=BackupExport)
async def export_backup(
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> BackupExport:
    """Everything the caller owns, in the shape accepted by the import."""

    require_admin(policy.principal)
    own = policy.own

    async def owned(model, *order_by):
        result = await session.execute(select(model).where(own.clause(model)).order_by(*order_by))
        return list(result.scalars().all())

    settings_row = await get_or_create_settings(session, policy.principal.user_id)
    await session.commit()
    logger.info("Backup exported for %s", policy.principal.username)

    return BackupExport(
        clients=[ClientRead.model_validate(row) for row in await owned(Client, Client.name)],
        materials=[MaterialRead.model_validate(row) for row in await owned(Material, Material.name)],
        stock_items=[
            StockItemRead.model_validate(row) for row in await owned(StockItem, StockItem.brand)
        ],
        calculations=[
            CalculationRead.model_validate(row)
            for row in await owned(Calculation, Calculation.date)
        ],
        settings=SettingsRead.model_validate(settings_row),
    )
