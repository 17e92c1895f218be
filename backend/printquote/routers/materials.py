"""Material catalogue endpoints."""
from typing import Sequence

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import apply_patch, get_db_session, get_in_scope, get_policy
from ..models import Material
from ..policy import AccessPolicy, EntityKind, Operation
from ..schemas import MaterialCreate, MaterialRead, MaterialUpdate, OkResponse

router = APIRouter(prefix="/api/materials", tags=["materials"])


@router.get("", response_model=list[MaterialRead])
async def list_materials(
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Material]:
    scope = policy.scope(EntityKind.MATERIAL, Operation.READ)
    result = await session.execute(
        select(Material).where(scope.clause(Material)).order_by(Material.name)
    )
    return list(result.scalars().all())


@router.post("", response_model=MaterialRead, status_code=status.HTTP_201_CREATED)
async def create_material(
    payload: MaterialCreate,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> Material:
    policy.scope(EntityKind.MATERIAL, Operation.CREATE)
    material = Material(owner_id=policy.principal.user_id, **payload.model_dump())
    session.add(material)
    await session.commit()
    await session.refresh(material)
    return material


@router.patch("/{material_id}", response_model=MaterialRead)
async def update_material(
    material_id: str,
    payload: MaterialUpdate,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> Material:
    scope = policy.scope(EntityKind.MATERIAL, Operation.MODIFY)
    material = await get_in_scope(session, Material, material_id, scope)
    apply_patch(material, payload)
    await session.commit()
    await session.refresh(material)
    return material


@router.delete("/{material_id}", response_model=OkResponse)
async def delete_material(
    material_id: str,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> OkResponse:
    scope = policy.scope(EntityKind.MATERIAL, Operation.MODIFY)
    material = await get_in_scope(session, Material, material_id, scope)
    await session.delete(material)
    await session.commit()
    return OkResponse()
