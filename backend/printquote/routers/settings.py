"""Per-owner pricing settings."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..dependencies import apply_patch, get_db_session, get_policy
from ..policy import AccessPolicy, EntityKind, Operation
from ..schemas import SettingsRead, SettingsUpdate
from ..services.accounts import employee_for_user, get_or_create_settings

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=SettingsRead)
async def read_settings(
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> SettingsRead:
    """The caller's settings, created with defaults on first access.

    An employee without a logo of their own is shown the logo of the admin
    who employs them; that fill-in is never written back.
    """

    policy.scope(EntityKind.SETTINGS, Operation.READ)
    principal = policy.principal
    row = await get_or_create_settings(session, principal.user_id)
    await session.commit()

    result = SettingsRead.model_validate(row)
    if not principal.is_admin and not result.logo_url:
        employee = await employee_for_user(session, principal.user_id)
        if employee is not None:
            admin_settings = await get_or_create_settings(session, employee.owner_id)
            result = result.model_copy(update={"logo_url": admin_settings.logo_url})
            await session.commit()
    return result


@router.patch("", response_model=SettingsRead)
async def update_settings(
    payload: SettingsUpdate,
    policy: AccessPolicy = Depends(get_policy),
    session: AsyncSession = Depends(get_db_session),
) -> SettingsRead:
    policy.scope(EntityKind.SETTINGS, Operation.MODIFY)
    row = await get_or_create_settings(session, policy.principal.user_id)
    apply_patch(row, payload)
    await session.commit()
    await session.refresh(row)
    return SettingsRead.model_validate(row)
