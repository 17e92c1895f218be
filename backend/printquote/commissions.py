"""Monthly commission report over confirmed quotes."""
from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Mapping

from .costing import round2

NO_SELLER_LABEL = "No seller"


@dataclass
class SellerCommission:
    employee_id: str | None
    seller_name: str
    rate: float
    quote_count: int = 0
    gross_revenue: float = 0.0
    commission: float = 0.0
    quote_ids: list[str] = field(default_factory=list)


@dataclass
class CommissionReport:
    year: int
    month: int
    groups: list[SellerCommission] = field(default_factory=list)
    quote_count: int = 0
    gross_revenue: float = 0.0
    commission: float = 0.0


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """First and last instant of a civil month, both inclusive."""

    last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1)
    end = datetime(year, month, last_day, 23, 59, 59, 999999)
    return start, end


def build_commission_report(
    calculations: Iterable[Any],
    employees: Mapping[str, Any],
    year: int,
    month: int,
) -> CommissionReport:
    """Group the confirmed quotes of a month by seller.

    ``employees`` maps employee ids to the live rows visible to the caller;
    the rate is read from there at report time, so a deleted seller keeps
    the name frozen on its quotes but earns at 0%.
    """

    start, end = month_bounds(year, month)
    groups: dict[str | None, SellerCommission] = {}

    for calc in calculations:
        if calc.status != "confirmed" or calc.date is None:
            continue
        if not (start <= calc.date <= end):
            continue

        key = calc.employee_id or None
        group = groups.get(key)
        if group is None:
            employee = employees.get(key) if key else None
            if employee is not None:
                name = employee.name
                rate = float(employee.commission_rate_percent or 0)
            else:
                name = calc.employee_name or NO_SELLER_LABEL
                rate = 0.0
            group = SellerCommission(employee_id=key, seller_name=name, rate=rate)
            groups[key] = group

        group.quote_count += 1
        group.gross_revenue += float(calc.suggested_price or 0)
        group.quote_ids.append(calc.id)

    report = CommissionReport(year=year, month=month)
    for group in groups.values():
        group.commission = round2(group.gross_revenue * group.rate / 100)
        group.gross_revenue = round2(group.gross_revenue)
        report.quote_count += group.quote_count
        report.gross_revenue += group.gross_revenue
        report.commission += group.commission

    report.groups = sorted(groups.values(), key=lambda g: g.gross_revenue, reverse=True)
    report.gross_revenue = round2(report.gross_revenue)
    report.commission = round2(report.commission)
    return report
