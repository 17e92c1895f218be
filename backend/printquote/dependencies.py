"""Reusable FastAPI dependencies."""
from __future__ import annotations

from collections.abc import AsyncGenerator

import jwt
from fastapi import Depends, Request
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .context import AppContext
from .errors import Forbidden, NotAuthenticated, NotFound
from .models import AuthSession, Employee
from .policy import AccessPolicy, OwnerScope, Principal
from .security import decode_session_token


def get_context(request: Request) -> AppContext:
    """The application context installed by ``create_app``."""

    return request.app.state.context


async def get_db_session(
    context: AppContext = Depends(get_context),
) -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields an AsyncSession per request."""

    async with context.sessionmaker() as session:
        yield session


async def load_auth_session(
    request: Request, session: AsyncSession, context: AppContext
) -> AuthSession | None:
    """Resolve the session row referenced by the cookie, if it is still valid."""

    token = request.cookies.get(context.settings.session_cookie_name)
    if not token:
        return None
    try:
        session_id = decode_session_token(token, context.settings.secret_key)
    except jwt.PyJWTError:
        return None

    auth_session = await session.get(AuthSession, session_id)
    if auth_session is None or auth_session.expires_at <= context.clock():
        return None
    return auth_session


async def get_principal(
    request: Request,
    session: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> Principal:
    """Return the authenticated caller or raise ``NotAuthenticated``."""

    auth_session = await load_auth_session(request, session, context)
    if auth_session is None:
        raise NotAuthenticated()
    # picked up by the request log line
    request.state.user_id = auth_session.user_id
    return Principal(
        user_id=auth_session.user_id,
        username=auth_session.username,
        is_admin=auth_session.is_admin,
        is_master_admin=auth_session.is_master_admin,
    )


async def get_policy(
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(get_db_session),
) -> AccessPolicy:
    """Build the caller's access policy, including the quote fan-out for admins."""

    linked: list[str] = []
    if principal.is_admin:
        result = await session.execute(
            select(Employee.linked_user_id).where(
                Employee.owner_id == principal.user_id,
                Employee.linked_user_id.is_not(None),
            )
        )
        linked = [row for row in result.scalars().all() if row]
    return AccessPolicy(principal, linked)


def require_admin(principal: Principal) -> None:
    """Ensure the current user has the admin role."""

    if not principal.is_admin:
        raise Forbidden("Administrator role required")


def require_master_admin(principal: Principal) -> None:
    """Ensure the current user is the master administrator."""

    if not principal.is_master_admin:
        raise Forbidden("Only the master administrator can do this")


async def get_in_scope(session: AsyncSession, model, row_id: str, scope: OwnerScope):
    """Load one row by id within an owner scope; ``NotFound`` otherwise."""

    row = await session.scalar(select(model).where(model.id == row_id, scope.clause(model)))
    if row is None:
        raise NotFound(f"{model.__name__} not found")
    return row


def apply_patch(row, payload: BaseModel) -> None:
    """Copy the explicitly supplied, non-null fields of ``payload`` onto ``row``."""

    for name, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(row, name, value)
