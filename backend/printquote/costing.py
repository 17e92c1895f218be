"""Quote costing engine.

A single pure function, :func:`compute_quote`, turns the owner's printer,
energy and labour parameters plus a list of line items into the full price
breakdown. The API recomputes and stores these figures on every save and
serves the same computation as a live preview, so the numbers a client sees
are always the ones that get persisted.

Money rounding follows one rule: each line total is rounded to cents and the
grand total is the sum of those rounded line totals, so the printed lines
always add up to the printed total.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Iterable, Mapping

# Denominator floor for the per-hour depreciation
MIN_PRINTER_LIFESPAN_HOURS = 6000.0

_NOISE = Decimal("1e-9")
_CENTS = Decimal("0.01")
_DECIMAL_PRECISION = 400


def round2(value: float | int | None) -> float:
    """Round half away from zero to two decimals.

    Binary float noise (e.g. ``42.674999999999997``) is discarded first so
    that values meant as ``x.xx5`` round up as they would on paper. Never
    raises; infinities and NaN are returned unchanged.
    """

    if not value:
        return 0.0
    number = float(value)
    if not math.isfinite(number):
        return number
    with localcontext() as ctx:
        # wide enough for every finite float at 1e-9 resolution
        ctx.prec = _DECIMAL_PRECISION
        exact = Decimal(repr(number)).quantize(_NOISE, rounding=ROUND_HALF_UP)
        return float(exact.quantize(_CENTS, rounding=ROUND_HALF_UP))


def _number(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


@dataclass(frozen=True)
class CostParameters:
    """The per-quote snapshot of the owner's pricing settings."""

    profit_margin_percent: float = 100.0
    labor_cost_per_hour: float = 5.0
    energy_cost_per_kwh: float = 0.9
    printer_purchase_price: float = 1200.0
    printer_lifespan_hours: float = 6000.0
    printer_power_watts: float = 150.0

    @classmethod
    def from_settings(cls, settings: Any, profit_margin_percent: float | None = None) -> "CostParameters":
        """Snapshot a settings row; an explicit margin overrides the stored one."""

        margin = (
            profit_margin_percent
            if profit_margin_percent is not None
            else getattr(settings, "profit_margin_percent", None)
        )
        return cls(
            profit_margin_percent=_number(margin),
            labor_cost_per_hour=_number(getattr(settings, "labor_cost_per_hour", None)),
            energy_cost_per_kwh=_number(getattr(settings, "energy_cost_per_kwh", None)),
            printer_purchase_price=_number(getattr(settings, "printer_purchase_price", None)),
            printer_lifespan_hours=_number(getattr(settings, "printer_lifespan_hours", None)),
            printer_power_watts=_number(getattr(settings, "printer_power_watts", None)),
        )

    @property
    def energy_per_hour(self) -> float:
        return (_number(self.printer_power_watts) / 1000) * _number(self.energy_cost_per_kwh)

    @property
    def depreciation_per_hour(self) -> float:
        lifespan = max(_number(self.printer_lifespan_hours), MIN_PRINTER_LIFESPAN_HOURS)
        return _number(self.printer_purchase_price) / lifespan

    @property
    def profit_factor(self) -> float:
        return 1 + _number(self.profit_margin_percent) / 100


@dataclass(frozen=True)
class LineItem:
    """One printable part of a quote."""

    description: str = ""
    stock_item_id: str | None = None
    grams: float = 0.0
    hours: float = 0.0
    minutes: float = 0.0
    qty: int = 1

    @property
    def quantity(self) -> int:
        # a blank quantity means one piece
        qty = int(_number(self.qty))
        return qty if qty > 0 else 1

    @property
    def hours_total(self) -> float:
        return _number(self.hours) + _number(self.minutes) / 60


@dataclass(frozen=True)
class LineResult:
    description: str
    stock_item_id: str | None
    qty: int
    hours_total: float
    material_unit_cost: float
    energy_unit_cost: float
    depreciation_unit_cost: float
    labor_unit_cost: float
    unit_cost: float
    unit_price: float
    line_total: float


@dataclass(frozen=True)
class QuoteBreakdown:
    lines: list[LineResult] = field(default_factory=list)
    profit_margin_percent: float = 0.0
    energy_per_hour: float = 0.0
    depreciation_per_hour: float = 0.0
    material_cost: float = 0.0
    energy_cost: float = 0.0
    depreciation_cost: float = 0.0
    labor_cost: float = 0.0
    total_cost: float = 0.0
    suggested_price: float = 0.0
    profit: float = 0.0
    qty_total: int = 0
    unit_average_price: float = 0.0


def compute_quote(
    params: CostParameters,
    items: Iterable[LineItem],
    unit_costs: Mapping[str, float] | None = None,
) -> QuoteBreakdown:
    """Price a list of line items.

    ``unit_costs`` maps stock item ids to their cost per kilogram; lines that
    reference an unknown roll (or none) carry no material cost. Never raises.
    """

    unit_costs = unit_costs or {}
    energy_per_hour = params.energy_per_hour
    depreciation_per_hour = params.depreciation_per_hour
    profit_factor = params.profit_factor
    labor_per_hour = _number(params.labor_cost_per_hour)

    material_sum = energy_sum = depreciation_sum = labor_sum = 0.0
    lot_total = 0.0
    qty_total = 0
    results: list[LineResult] = []

    for item in items:
        qty = item.quantity
        hours_total = item.hours_total
        cost_per_kg = _number(unit_costs.get(item.stock_item_id)) if item.stock_item_id else 0.0

        material_unit = cost_per_kg * _number(item.grams) / 1000
        energy_unit = hours_total * energy_per_hour
        depreciation_unit = hours_total * depreciation_per_hour
        labor_unit = hours_total * labor_per_hour
        unit_cost = material_unit + energy_unit + depreciation_unit + labor_unit
        unit_price = unit_cost * profit_factor
        line_total = round2(unit_price * qty)

        material_sum += material_unit * qty
        energy_sum += energy_unit * qty
        depreciation_sum += depreciation_unit * qty
        labor_sum += labor_unit * qty
        lot_total += line_total
        qty_total += qty

        results.append(
            LineResult(
                description=item.description or "",
                stock_item_id=item.stock_item_id,
                qty=qty,
                hours_total=hours_total,
                material_unit_cost=material_unit,
                energy_unit_cost=energy_unit,
                depreciation_unit_cost=depreciation_unit,
                labor_unit_cost=labor_unit,
                unit_cost=unit_cost,
                unit_price=unit_price,
                line_total=line_total,
            )
        )

    total_cost = round2(material_sum + energy_sum + depreciation_sum + labor_sum)
    suggested_price = round2(lot_total)

    return QuoteBreakdown(
        lines=results,
        profit_margin_percent=_number(params.profit_margin_percent),
        energy_per_hour=energy_per_hour,
        depreciation_per_hour=depreciation_per_hour,
        material_cost=round2(material_sum),
        energy_cost=round2(energy_sum),
        depreciation_cost=round2(depreciation_sum),
        labor_cost=round2(labor_sum),
        total_cost=total_cost,
        suggested_price=suggested_price,
        profit=round2(suggested_price - total_cost),
        qty_total=qty_total,
        unit_average_price=round2(suggested_price / qty_total) if qty_total > 0 else 0.0,
    )
