"""Client endpoints."""
from typing import Sequence

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import apply_patch, get_db_session, get_in_scope, get_policy
from ..errors import InvalidInput
from ..models import Client
from ..policy import AccessPolicy, EntityKind, Operation
from ..schemas import ClientCreate, ClientRead, ClientUpdate, OkResponse

router = APIRouter(prefix="/api/clients", tags=["clients"])


async def _ensure_unique_tax_id(
    session: AsyncSession, owner_id: str, tax_id: str | None, exclude_id: str | None = None
) -> None:
    # empty tax ids may repeat
    if not tax_id:
        return
    query = select(Client.id).where(Client.owner_id == owner_id, Client.tax_id == tax_id)
    if exclude_id is not None:
        query = query.where(Client.id != exclude_id)
    if await session.scalar(query) is not None:
        raise InvalidInput("A client with this tax ID already exists")


@router.get("", response_model=list[ClientRead])
async def list_clients(
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Client]:
    scope = policy.scope(EntityKind.CLIENT, Operation.READ)
    result = await session.execute(select(Client).where(scope.clause(Client)).order_by(Client.name))
    return list(result.scalars().all())


@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
async def create_client(
    payload: ClientCreate,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> Client:
    """Create a client owned by the caller."""

    policy.scope(EntityKind.CLIENT, Operation.CREATE)
    owner_id = policy.principal.user_id
    await _ensure_unique_tax_id(session, owner_id, payload.tax_id)

    data = payload.model_dump()
    data["email"] = data["email"] or ""
    client = Client(owner_id=owner_id, **data)
    session.add(client)
    await session.commit()
    await session.refresh(client)
    return client


@router.patch("/{client_id}", response_model=ClientRead)
async def update_client(
    client_id: str,
    payload: ClientUpdate,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> Client:
    scope = policy.scope(EntityKind.CLIENT, Operation.MODIFY)
    client = await get_in_scope(session, Client, client_id, scope)
    if payload.tax_id is not None and payload.tax_id != client.tax_id:
        await _ensure_unique_tax_id(session, client.owner_id, payload.tax_id, exclude_id=client.id)
    apply_patch(client, payload)
    await session.commit()
    await session.refresh(client)
    return client


@router.delete("/{client_id}", response_model=OkResponse)
async def delete_client(
    client_id: str,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> OkResponse:
    scope = policy.scope(EntityKind.CLIENT, Operation.MODIFY)
    client = await get_in_scope(session, Client, client_id, scope)
    await session.delete(client)
    await session.commit()
    return OkResponse()
