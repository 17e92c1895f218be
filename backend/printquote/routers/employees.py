"""Employee (seller) endpoints."""
import logging
from typing import Sequence

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..context import AppContext
from ..dependencies import apply_patch, get_context, get_db_session, get_in_scope, get_policy
from ..models import Employee
from ..policy import AccessPolicy, EntityKind, Operation
from ..schemas import EmployeeCreate, EmployeeCreated, EmployeeRead, EmployeeUpdate, OkResponse
from ..services.accounts import create_employee_login

logger = logging.getLogger("printquote.employees")

router = APIRouter(prefix="/api/employees", tags=["employees"])


@router.get("", response_model=list[EmployeeRead])
async def list_employees(
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[Employee]:
    """Admins see their own staff; an employee sees only their own record."""

    scope = policy.scope(EntityKind.EMPLOYEE, Operation.READ)
    result = await session.execute(
        select(Employee).where(scope.clause(Employee)).order_by(Employee.name)
    )
    return list(result.scalars().all())


@router.post("", response_model=EmployeeCreated, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> EmployeeCreated:
    """Create an employee together with its login.

    The generated password is returned here once and never stored in clear.
    """

    policy.scope(EntityKind.EMPLOYEE, Operation.CREATE)
    data = payload.model_dump()
    data["email"] = data["email"] or ""
    employee = Employee(owner_id=policy.principal.user_id, **data)
    session.add(employee)
    await session.flush()

    user, password = await create_employee_login(session, context, employee)
    await session.commit()
    await session.refresh(employee)
    logger.info("Employee %s created with login %s", employee.id, user.username)

    return EmployeeCreated(
        **EmployeeRead.model_validate(employee).model_dump(),
        generated_username=user.username,
        generated_password=password,
    )


@router.patch("/{employee_id}", response_model=EmployeeRead)
async def update_employee(
    employee_id: str,
    payload: EmployeeUpdate,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> Employee:
    scope = policy.scope(EntityKind.EMPLOYEE, Operation.MODIFY)
    employee = await get_in_scope(session, Employee, employee_id, scope)
    apply_patch(employee, payload)
    await session.commit()
    await session.refresh(employee)
    return employee


@router.delete("/{employee_id}", response_model=OkResponse)
async def delete_employee(
    employee_id: str,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> OkResponse:
    """Remove the record; past quotes keep the seller name they were saved with."""

    scope = policy.scope(EntityKind.EMPLOYEE, Operation.MODIFY)
    employee = await get_in_scope(session, Employee, employee_id, scope)
    await session.delete(employee)
    await session.commit()
    return OkResponse()
