"""User administration, reserved to the master administrator."""
import logging
from typing import Sequence

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..context import AppContext
from ..dependencies import get_context, get_db_session, get_policy, get_principal
from ..errors import Forbidden, InvalidInput, NotFound
from ..models import User
from ..policy import AccessPolicy, EntityKind, Operation, Principal
from ..schemas import OkResponse, PasswordChange, UserCreate, UserRead
from ..security import MIN_PASSWORD_LENGTH, is_strong_enough
from ..services.accounts import create_admin_account, delete_user_cascade

logger = logging.getLogger("printquote.users")

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[UserRead])
async def list_users(
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> Sequence[User]:
    policy.scope(EntityKind.USER, Operation.READ)
    result = await session.execute(select(User).order_by(User.created_at, User.username))
    return list(result.scalars().all())


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> User:
    """Create an administrator account with identity data for password recovery."""

    policy.scope(EntityKind.USER, Operation.CREATE)
    user = await create_admin_account(
        session,
        context,
        username=payload.username,
        password=payload.password,
        national_id=payload.national_id,
        birthdate=payload.birthdate,
        password_hint=payload.password_hint,
    )
    await session.commit()
    await session.refresh(user)
    logger.info("User %s created by %s", user.username, policy.principal.username)
    return user


@router.patch("/{user_id}/password", response_model=OkResponse)
async def change_password(
    user_id: str,
    payload: PasswordChange,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> OkResponse:
    """Change a password: your own with the current one, anyone's as master admin."""

    is_self = user_id == principal.user_id
    if not is_self and not principal.is_master_admin:
        raise Forbidden("Only the master administrator can change other users' passwords")

    user = await session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    if is_self and not context.hasher.verify(payload.current_password or "", user.password_hash):
        raise InvalidInput("Current password is incorrect")
    if not is_strong_enough(payload.new_password):
        raise InvalidInput(f"Password must have at least {MIN_PASSWORD_LENGTH} characters")

    user.password_hash = context.hasher.hash(payload.new_password)
    if payload.password_hint is not None:
        user.password_hint = payload.password_hint.strip() or None
    await session.commit()
    logger.info("Password of %s changed by %s", user.username, principal.username)
    return OkResponse()


@router.delete("/{user_id}", response_model=OkResponse)
async def delete_user(
    user_id: str,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> OkResponse:
    """Delete a user and everything it owns."""

    policy.scope(EntityKind.USER, Operation.MODIFY)
    if user_id == policy.principal.user_id:
        raise InvalidInput("You cannot delete your own account")
    user = await session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")

    username = user.username
    await delete_user_cascade(session, user_id)
    await session.commit()
    logger.warning("User %s and all owned data deleted by %s", username, policy.principal.username)
    return OkResponse()
