"""Monthly commission report."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..commissions import build_commission_report, month_bounds
from ..context import AppContext
from ..dependencies import get_context, get_db_session, get_policy
from ..models import Calculation, Employee
from ..policy import AccessPolicy, EntityKind, Operation
from ..schemas import CommissionReportRead

router = APIRouter(prefix="/api/commissions", tags=["commissions"])

# employeeId value selecting the quotes saved without a seller
NO_SELLER_FILTER = "none"


@router.get("", response_model=CommissionReportRead)
async def commission_report(
    year: int | None = Query(default=None, ge=1970, le=9999),
    month: int | None = Query(default=None, ge=1, le=12),
    employee_id: str | None = Query(default=None, alias="employeeId"),
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> CommissionReportRead:
    """Confirmed quotes of one month grouped by seller (current month by default)."""

    today = context.clock()
    year = year or today.year
    month = month or today.month
    start, end = month_bounds(year, month)

    quote_scope = policy.scope(EntityKind.CALCULATION, Operation.READ)
    employee_scope = policy.scope(EntityKind.EMPLOYEE, Operation.READ)

    employees = {
        row.id: row
        for row in (
            await session.execute(select(Employee).where(employee_scope.clause(Employee)))
        ).scalars()
    }

    query = select(Calculation).where(
        quote_scope.clause(Calculation),
        Calculation.status == "confirmed",
        Calculation.date >= start,
        Calculation.date <= end,
    )
    if not policy.principal.is_admin:
        # sellers only see their own group
        query = query.where(Calculation.employee_id.in_(sorted(employees)))
    if employee_id == NO_SELLER_FILTER:
        query = query.where(Calculation.employee_id.is_(None))
    elif employee_id:
        query = query.where(Calculation.employee_id == employee_id)

    calculations = (await session.execute(query)).scalars().all()
    report = build_commission_report(calculations, employees, year, month)
    return CommissionReportRead.model_validate(report)
