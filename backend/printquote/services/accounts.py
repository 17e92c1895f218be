"""Account bootstrap, employee logins and cascade deletion."""
from __future__ import annotations

import logging
import re
import unicodedata

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..catalog import DEFAULT_MATERIALS
from ..context import AppContext
from ..errors import Conflict, InvalidInput
from ..models import OWNED_MODELS, AuthSession, Employee, Material, ShopSettings, User
from ..security import (
    MIN_PASSWORD_LENGTH,
    digits_only,
    generate_temp_password,
    is_strong_enough,
)

logger = logging.getLogger("printquote.accounts")

FALLBACK_USERNAME = "user"


async def seed_materials(session: AsyncSession, owner_id: str) -> int:
    """Fill an empty material catalogue with the presets; returns rows added."""

    count = await session.scalar(
        select(func.count()).select_from(Material).where(Material.owner_id == owner_id)
    )
    if count:
        return 0
    session.add_all(
        Material(owner_id=owner_id, name=preset.name, cost_per_kg=preset.cost_per_kg)
        for preset in DEFAULT_MATERIALS
    )
    await session.flush()
    logger.info("Seeded %d default materials for user %s", len(DEFAULT_MATERIALS), owner_id)
    return len(DEFAULT_MATERIALS)


async def get_or_create_settings(session: AsyncSession, owner_id: str) -> ShopSettings:
    """The owner's settings row, created with defaults on first access."""

    row = await session.scalar(select(ShopSettings).where(ShopSettings.owner_id == owner_id))
    if row is None:
        row = ShopSettings(id=owner_id, owner_id=owner_id)
        session.add(row)
        await session.flush()
    return row


async def earliest_user(session: AsyncSession) -> User | None:
    return await session.scalar(select(User).order_by(User.created_at, User.id).limit(1))


async def promote_if_first_user(session: AsyncSession, user: User) -> bool:
    """Make the earliest account an admin. Idempotent once it holds."""

    if user.is_admin:
        return False
    first = await earliest_user(session)
    if first is None or first.id != user.id:
        return False
    user.is_admin = True
    await session.flush()
    logger.info("Promoted first user %s to admin", user.username)
    return True


def username_slug(name: str) -> str:
    """Lower-case ASCII letters of the first name, accents stripped."""

    first = (name or "").strip().split(" ")[0] if (name or "").strip() else ""
    decomposed = unicodedata.normalize("NFD", first.lower())
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"[^a-z]", "", without_marks)


async def derive_username(session: AsyncSession, name: str) -> str:
    """First-name slug, then slug1, slug2, ... for the smallest free suffix."""

    base = username_slug(name) or FALLBACK_USERNAME
    taken = set(
        (
            await session.execute(
                select(User.username).where(User.username.like(f"{base}%"))
            )
        ).scalars().all()
    )
    if base not in taken:
        return base
    counter = 1
    while f"{base}{counter}" in taken:
        counter += 1
    return f"{base}{counter}"


async def create_employee_login(
    session: AsyncSession,
    context: AppContext,
    employee: Employee,
) -> tuple[User, str]:
    """Create the companion login of a new employee and link it.

    Runs inside the caller's transaction so the employee, its user and the
    generated credentials are committed together. Returns the user and the
    clear-text password, which is never stored.
    """

    username = await derive_username(session, employee.name)
    password = generate_temp_password(context.rng)
    user = User(
        username=username,
        password_hash=context.hasher.hash(password),
        is_admin=False,
        must_change_password=True,
        created_at=context.clock(),
    )
    session.add(user)
    await session.flush()
    await seed_materials(session, user.id)
    employee.linked_user_id = user.id
    await session.flush()
    return user, password


async def delete_user_cascade(session: AsyncSession, user_id: str) -> None:
    """Delete a user together with every row it owns, in one transaction.

    Employee records elsewhere that log in as this user are kept but unlinked.
    """

    await session.execute(
        update(Employee).where(Employee.linked_user_id == user_id).values(linked_user_id=None)
    )
    for model in OWNED_MODELS:
        await session.execute(delete(model).where(model.owner_id == user_id))
    await session.execute(delete(AuthSession).where(AuthSession.user_id == user_id))
    await session.execute(delete(User).where(User.id == user_id))


async def employee_for_user(session: AsyncSession, user_id: str) -> Employee | None:
    return await session.scalar(select(Employee).where(Employee.linked_user_id == user_id))


async def admin_contact_phone(session: AsyncSession, user: User) -> str | None:
    """Phone of the admin responsible for ``user``.

    That is the owner of the user's employee record, falling back to the
    earliest admin account.
    """

    admin_id: str | None = None
    employee = await employee_for_user(session, user.id)
    if employee is not None:
        admin_id = employee.owner_id
    elif user.is_admin:
        admin_id = user.id
    if admin_id is None:
        admin_id = await session.scalar(
            select(User.id).where(User.is_admin.is_(True)).order_by(User.created_at, User.id).limit(1)
        )
    if admin_id is None:
        return None
    settings_row = await get_or_create_settings(session, admin_id)
    return settings_row.admin_contact_phone


async def count_admins(session: AsyncSession) -> int:
    return await session.scalar(
        select(func.count()).select_from(User).where(User.is_admin.is_(True))
    ) or 0


async def create_admin_account(
    session: AsyncSession,
    context: AppContext,
    *,
    username: str,
    password: str,
    national_id: str | None = None,
    birthdate: str | None = None,
    password_hint: str | None = None,
    require_identity: bool = True,
) -> User:
    """Validate and add an admin login with a seeded material catalogue.

    Flushes only; the caller commits.
    """

    username = (username or "").strip()
    if not username:
        raise InvalidInput("Username is required")
    if not is_strong_enough(password):
        raise InvalidInput(f"Password must have at least {MIN_PASSWORD_LENGTH} characters")
    national_id = digits_only(national_id)
    birthdate = (birthdate or "").strip()
    if require_identity and (not national_id or not birthdate):
        raise InvalidInput("National ID and birthdate are required")

    existing = await session.scalar(select(User.id).where(User.username == username))
    if existing is not None:
        raise Conflict("Username already exists")

    user = User(
        username=username,
        password_hash=context.hasher.hash(password),
        is_admin=True,
        must_change_password=False,
        national_id=national_id or None,
        birthdate=birthdate or None,
        password_hint=(password_hint or "").strip() or None,
        created_at=context.clock(),
    )
    session.add(user)
    await session.flush()
    await seed_materials(session, user.id)
    return user
