"""Quote endpoints: save, reprice, status, stock consumption and preview."""
from typing import Sequence

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..context import AppContext
from ..dependencies import get_context, get_db_session, get_in_scope, get_policy
from ..models import Calculation
from ..policy import AccessPolicy, EntityKind, Operation
from ..schemas import (
    CalculationCreate,
    CalculationRead,
    CalculationSaved,
    CalculationUpdate,
    OkResponse,
    PreviewRequest,
    QuoteBreakdownRead,
    StatusUpdate,
    StockConsumption,
)
from ..services import quotes

router = APIRouter(prefix="/api/calculations", tags=["calculations"])


@router.get("", response_model=list[CalculationRead])
async def list_calculations(
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Calculation]:
    """Newest first. Admins also see the quotes of their employees' logins."""

    scope = policy.scope(EntityKind.CALCULATION, Operation.READ)
    result = await session.execute(
        select(Calculation)
        .where(scope.clause(Calculation))
        .order_by(Calculation.date.desc(), Calculation.id)
    )
    return list(result.scalars().all())


@router.post("", response_model=CalculationSaved, status_code=status.HTTP_201_CREATED)
async def create_calculation(
    payload: CalculationCreate,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> CalculationSaved:
    policy.scope(EntityKind.CALCULATION, Operation.CREATE)
    calc, alerts = await quotes.create_quote(session, context, policy, payload)
    return CalculationSaved(
        **CalculationRead.model_validate(calc).model_dump(),
        stock_alerts=alerts,
    )


@router.post("/preview", response_model=QuoteBreakdownRead)
async def preview_calculation(
    payload: PreviewRequest,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> QuoteBreakdownRead:
    """Price a draft with the caller's settings and stock without saving it."""

    policy.scope(EntityKind.CALCULATION, Operation.CREATE)
    breakdown = await quotes.price_quote(
        session, policy.principal.user_id, payload.items, payload.profit_margin_percent
    )
    return QuoteBreakdownRead.model_validate(breakdown)


@router.patch("/{calculation_id}", response_model=CalculationRead)
async def update_calculation(
    calculation_id: str,
    payload: CalculationUpdate,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> Calculation:
    scope = policy.scope(EntityKind.CALCULATION, Operation.MODIFY)
    calc = await get_in_scope(session, Calculation, calculation_id, scope)
    return await quotes.apply_update(session, policy, calc, payload)


@router.patch("/{calculation_id}/status", response_model=CalculationRead)
async def set_calculation_status(
    calculation_id: str,
    payload: StatusUpdate,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> Calculation:
    scope = policy.scope(EntityKind.CALCULATION, Operation.MODIFY)
    calc = await get_in_scope(session, Calculation, calculation_id, scope)
    if calc.status != payload.status:
        calc.status = payload.status
        await session.commit()
        await session.refresh(calc)
    return calc


@router.post("/{calculation_id}/consume-stock", response_model=StockConsumption)
async def consume_calculation_stock(
    calculation_id: str,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> StockConsumption:
    """Decrement stock again for a saved quote, e.g. after a reprint."""

    scope = policy.scope(EntityKind.CALCULATION, Operation.MODIFY)
    calc = await get_in_scope(session, Calculation, calculation_id, scope)
    items = quotes.saved_items(calc)
    alerts = await quotes.consume_stock(session, calc.owner_id, items)
    return StockConsumption(stock_alerts=alerts)


@router.delete("/{calculation_id}", response_model=OkResponse)
async def delete_calculation(
    calculation_id: str,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> OkResponse:
    """Delete a quote. Consumed stock is not restored."""

    scope = policy.scope(EntityKind.CALCULATION, Operation.MODIFY)
    calc = await get_in_scope(session, Calculation, calculation_id, scope)
    await session.delete(calc)
    await session.commit()
    return OkResponse()
