"""Quote lifecycle: pricing, persistence and stock consumption.

``Calculation.details`` is the editor's document. The server owns two keys
in it and passes everything else through untouched:

``items``
    the line items the totals were computed from (camelCase dicts);
``profitMarginPercent``
    the margin in effect when the quote was saved. Reopening or repricing a
    saved quote uses this value instead of the owner's current margin.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Iterable

from pydantic import ValidationError
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..context import AppContext
from ..costing import CostParameters, LineItem, QuoteBreakdown, compute_quote
from ..errors import InvalidInput
from ..models import Calculation, Employee, Material, StockItem
from ..policy import AccessPolicy
from ..schemas import CalculationCreate, CalculationUpdate, LineItemIn
from .accounts import get_or_create_settings

logger = logging.getLogger("printquote.quotes")

DETAILS_ITEMS_KEY = "items"
DETAILS_MARGIN_KEY = "profitMarginPercent"

LOW_STOCK_GRAMS = 200.0
UNIDENTIFIED_CLIENT = "Unidentified client"


def to_line_items(items: Iterable[LineItemIn]) -> list[LineItem]:
    return [
        LineItem(
            description=item.description,
            stock_item_id=item.stock_item_id,
            grams=item.grams,
            hours=item.hours,
            minutes=item.minutes,
            qty=item.qty,
        )
        for item in items
    ]


def pack_details(
    details: dict[str, Any] | None, items: list[LineItemIn], margin: float
) -> dict[str, Any]:
    packed = dict(details or {})
    packed[DETAILS_ITEMS_KEY] = [item.model_dump(by_alias=True) for item in items]
    packed[DETAILS_MARGIN_KEY] = margin
    return packed


def saved_items(calc: Calculation) -> list[LineItemIn]:
    raw = (calc.details or {}).get(DETAILS_ITEMS_KEY) or []
    items: list[LineItemIn] = []
    for entry in raw:
        try:
            items.append(LineItemIn.model_validate(entry))
        except ValidationError:
            logger.warning("Skipping malformed line item on quote %s", calc.id)
    return items


def saved_margin(calc: Calculation) -> float | None:
    value = (calc.details or {}).get(DETAILS_MARGIN_KEY)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


async def unit_costs_for(
    session: AsyncSession, owner_id: str, items: Iterable[LineItemIn]
) -> dict[str, float]:
    """Cost per kilogram of the owner's rolls referenced by ``items``."""

    ids = {item.stock_item_id for item in items if item.stock_item_id}
    if not ids:
        return {}
    result = await session.execute(
        select(StockItem.id, StockItem.unit_cost).where(
            StockItem.owner_id == owner_id, StockItem.id.in_(sorted(ids))
        )
    )
    return {row.id: row.unit_cost for row in result}


async def price_quote(
    session: AsyncSession,
    owner_id: str,
    items: list[LineItemIn],
    margin_override: float | None = None,
) -> QuoteBreakdown:
    """Run the costing engine with the owner's stored settings and stock."""

    settings_row = await get_or_create_settings(session, owner_id)
    params = CostParameters.from_settings(settings_row, margin_override)
    unit_costs = await unit_costs_for(session, owner_id, items)
    return compute_quote(params, to_line_items(items), unit_costs)


async def resolve_employee(
    session: AsyncSession, policy: AccessPolicy, employee_id: str | None
) -> Employee | None:
    """The seller a quote is attributed to, among those visible to the caller."""

    if not employee_id:
        return None
    principal = policy.principal
    query = select(Employee).where(Employee.id == employee_id)
    if principal.is_admin:
        query = query.where(Employee.owner_id == principal.user_id)
    else:
        query = query.where(Employee.linked_user_id == principal.user_id)
    employee = await session.scalar(query)
    if employee is None:
        raise InvalidInput("Unknown employee")
    return employee


async def consume_stock(
    session: AsyncSession, owner_id: str, items: Iterable[LineItemIn]
) -> list[dict[str, Any]]:
    """Decrement the rolls used by ``items`` and report low or empty ones.

    Each roll is updated in its own transaction; a failure is logged and
    skipped so it never undoes the quote that triggered it.
    """

    usage: dict[str, float] = defaultdict(float)
    for item in items:
        if item.stock_item_id and item.grams > 0:
            usage[item.stock_item_id] += item.grams * item.qty

    alerts: list[dict[str, Any]] = []
    for stock_item_id, grams in usage.items():
        try:
            result = await session.execute(
                update(StockItem)
                .where(StockItem.id == stock_item_id, StockItem.owner_id == owner_id)
                .values(remaining_grams=StockItem.remaining_grams - grams)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await session.rollback()
                continue
            await session.commit()
            row = await session.scalar(
                select(StockItem)
                .where(StockItem.id == stock_item_id)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError:
            await session.rollback()
            logger.warning("Could not decrement stock item %s", stock_item_id, exc_info=True)
            continue

        if row is None or row.remaining_grams > LOW_STOCK_GRAMS:
            continue
        material = await session.scalar(
            select(Material).where(Material.id == row.material_id, Material.owner_id == owner_id)
        )
        alerts.append(
            {
                "stock_item_id": row.id,
                "material_name": material.name if material else "Unknown",
                "brand": row.brand,
                "color": row.color,
                "remaining_grams": row.remaining_grams,
                "kind": "depleted" if row.remaining_grams <= 0 else "low",
            }
        )
    return alerts


async def create_quote(
    session: AsyncSession,
    context: AppContext,
    policy: AccessPolicy,
    payload: CalculationCreate,
) -> tuple[Calculation, list[dict[str, Any]]]:
    """Price, persist and then consume stock for a new quote."""

    principal = policy.principal
    owner_id = principal.user_id

    employee = await resolve_employee(session, policy, payload.employee_id)
    if employee is None and not principal.is_admin:
        # sellers quote on their own behalf
        employee = await session.scalar(
            select(Employee).where(Employee.linked_user_id == principal.user_id)
        )

    breakdown = await price_quote(session, owner_id, payload.items, payload.profit_margin_percent)
    calc = Calculation(
        owner_id=owner_id,
        date=context.clock(),
        client_name=payload.client_name.strip() or UNIDENTIFIED_CLIENT,
        project_name=payload.project_name,
        total_cost=breakdown.total_cost,
        suggested_price=breakdown.suggested_price,
        status=payload.status,
        employee_id=employee.id if employee else None,
        employee_name=employee.name if employee else None,
        details=pack_details(payload.details, payload.items, breakdown.profit_margin_percent),
    )
    session.add(calc)
    await session.commit()
    logger.info(
        "Quote %s saved by %s: total %.2f", calc.id, principal.username, calc.suggested_price
    )

    alerts = await consume_stock(session, owner_id, payload.items)
    await session.refresh(calc)
    return calc, alerts


async def apply_update(
    session: AsyncSession,
    policy: AccessPolicy,
    calc: Calculation,
    payload: CalculationUpdate,
) -> Calculation:
    """Rewrite the supplied fields of a quote. ``date`` never changes."""

    fields = payload.model_fields_set

    if payload.client_name is not None:
        calc.client_name = payload.client_name.strip() or UNIDENTIFIED_CLIENT
    if payload.project_name is not None:
        calc.project_name = payload.project_name
    if payload.status is not None:
        calc.status = payload.status
    if "employee_id" in fields:
        employee = await resolve_employee(session, policy, payload.employee_id)
        calc.employee_id = employee.id if employee else None
        calc.employee_name = employee.name if employee else None

    reprice = payload.items is not None or payload.profit_margin_percent is not None
    if reprice or payload.details is not None:
        items = payload.items if payload.items is not None else saved_items(calc)
        margin = (
            payload.profit_margin_percent
            if payload.profit_margin_percent is not None
            else saved_margin(calc)
        )
        details = payload.details if payload.details is not None else calc.details
        if reprice:
            breakdown = await price_quote(session, calc.owner_id, items, margin)
            calc.total_cost = breakdown.total_cost
            calc.suggested_price = breakdown.suggested_price
            margin = breakdown.profit_margin_percent
        calc.details = pack_details(details, items, margin if margin is not None else 0.0)

    await session.commit()
    await session.refresh(calc)
    return calc
