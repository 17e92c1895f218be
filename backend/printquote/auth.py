"""Authentication routes: login, sessions, password recovery and first-run setup."""
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .context import AppContext
from .dependencies import get_context, get_db_session, get_principal, load_auth_session
from .errors import Forbidden, InvalidCredentials, InvalidInput, NotFound
from .models import AuthSession, User
from .policy import Principal
from .schemas import (
    AdminContactResponse,
    CheckAdminResponse,
    ForceChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    OkResponse,
    PasswordHintResponse,
    ResetPasswordRequest,
    SessionUser,
    SetupStatus,
    TempPasswordResponse,
    UserCreate,
    UserRead,
    UsernameRequest,
)
from .security import (
    MIN_PASSWORD_LENGTH,
    digits_only,
    encode_session_token,
    generate_temp_password,
    is_strong_enough,
)
from .services.accounts import (
    admin_contact_phone,
    count_admins,
    create_admin_account,
    promote_if_first_user,
    seed_materials,
)

logger = logging.getLogger("printquote.auth")

router = APIRouter(prefix="/api/auth", tags=["auth"])


async def _user_by_name(session: AsyncSession, username: str | None) -> User | None:
    username = (username or "").strip()
    if not username:
        raise InvalidInput("Username is required")
    return await session.scalar(select(User).where(User.username == username))


def _set_session_cookie(response: Response, context: AppContext, token: str) -> None:
    settings = context.settings
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        path="/",
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> LoginResponse:
    """Verify credentials and open a server-side session."""

    user = await session.scalar(select(User).where(User.username == payload.username.strip()))
    if user is None or not context.hasher.verify(payload.password, user.password_hash):
        logger.warning("Failed login for %r", payload.username)
        raise InvalidCredentials()

    await promote_if_first_user(session, user)
    await seed_materials(session, user.id)

    now = context.clock()
    expires_at = now + timedelta(minutes=context.settings.session_ttl_minutes)
    is_master = context.is_master_admin(user.username)
    auth_session = AuthSession(
        user_id=user.id,
        username=user.username,
        is_admin=user.is_admin,
        is_master_admin=is_master,
        created_at=now,
        expires_at=expires_at,
    )
    session.add(auth_session)
    await session.commit()

    token = encode_session_token(auth_session.id, expires_at, context.settings.secret_key)
    _set_session_cookie(response, context, token)
    logger.info("User %s logged in", user.username)
    return LoginResponse(
        id=user.id,
        username=user.username,
        is_admin=user.is_admin,
        is_master_admin=is_master,
        must_change_password=user.must_change_password,
    )


@router.post("/logout", response_model=OkResponse)
async def logout(
    request: Request,
    response: Response,
    session: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> OkResponse:
    auth_session = await load_auth_session(request, session, context)
    if auth_session is not None:
        await session.delete(auth_session)
        await session.commit()
    response.delete_cookie(context.settings.session_cookie_name, path="/")
    return OkResponse()


@router.get("/me", response_model=SessionUser)
async def me(principal: Principal = Depends(get_principal)) -> SessionUser:
    return SessionUser(
        id=principal.user_id,
        username=principal.username,
        is_admin=principal.is_admin,
        is_master_admin=principal.is_master_admin,
    )


@router.post("/check-admin", response_model=CheckAdminResponse)
async def check_admin(
    payload: UsernameRequest, session: AsyncSession = Depends(get_db_session)
) -> CheckAdminResponse:
    """Tell the login page whether a reset will need identity proofs."""

    username = (payload.username or "").strip()
    if not username:
        return CheckAdminResponse(is_admin=False)
    user = await _user_by_name(session, username)
    return CheckAdminResponse(is_admin=bool(user and user.is_admin))


@router.post("/reset-password", response_model=TempPasswordResponse)
async def reset_password(
    payload: ResetPasswordRequest,
    session: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> TempPasswordResponse:
    """Replace a forgotten password with a one-time temporary one.

    Administrators must prove their identity with the national id and
    birthdate stored on their account.
    """

    user = await _user_by_name(session, payload.username)
    if user is None:
        raise NotFound("User not found")

    if user.is_admin:
        national_id = digits_only(payload.national_id)
        birthdate = (payload.birthdate or "").strip()
        if not national_id or not birthdate:
            raise InvalidInput("National ID and birthdate are required for administrators")
        if national_id != digits_only(user.national_id) or birthdate != (user.birthdate or ""):
            logger.warning("Identity mismatch on password reset for %s", user.username)
            raise Forbidden("Identity data does not match")

    temp_password = generate_temp_password(context.rng)
    user.password_hash = context.hasher.hash(temp_password)
    user.must_change_password = True
    await session.commit()
    logger.info("Temporary password issued for %s", user.username)
    return TempPasswordResponse(temp_password=temp_password)


@router.post("/force-change-password", response_model=OkResponse)
async def force_change_password(
    payload: ForceChangePasswordRequest,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> OkResponse:
    """Set a new password after a reset and clear the change-required flag."""

    if not is_strong_enough(payload.new_password):
        raise InvalidInput(f"Password must have at least {MIN_PASSWORD_LENGTH} characters")
    user = await session.get(User, principal.user_id)
    if user is None:
        raise NotFound("User not found")
    user.password_hash = context.hasher.hash(payload.new_password)
    user.must_change_password = False
    await session.commit()
    return OkResponse()


@router.post("/password-hint", response_model=PasswordHintResponse)
async def password_hint(
    payload: UsernameRequest, session: AsyncSession = Depends(get_db_session)
) -> PasswordHintResponse:
    user = await _user_by_name(session, payload.username)
    if user is None:
        raise NotFound("User not found")
    return PasswordHintResponse(hint=user.password_hint)


@router.post("/admin-whatsapp", response_model=AdminContactResponse)
async def admin_whatsapp(
    payload: UsernameRequest, session: AsyncSession = Depends(get_db_session)
) -> AdminContactResponse:
    """Contact phone of the administrator who can reset this user's password."""

    user = await _user_by_name(session, payload.username)
    if user is None:
        raise NotFound("User not found")
    if not user.is_admin and await count_admins(session) == 0:
        raise NotFound("No administrator found")
    return AdminContactResponse(whatsapp=await admin_contact_phone(session, user))


@router.get("/setup-status", response_model=SetupStatus)
async def setup_status(session: AsyncSession = Depends(get_db_session)) -> SetupStatus:
    users = await session.scalar(select(func.count()).select_from(User))
    return SetupStatus(needs_setup=not users)


@router.post("/setup", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def setup(
    payload: UserCreate,
    session: AsyncSession = Depends(get_db_session),
    context: AppContext = Depends(get_context),
) -> User:
    """Create the first administrator of an empty installation."""

    if await session.scalar(select(func.count()).select_from(User)):
        raise Forbidden("Setup has already been completed")
    user = await create_admin_account(
        session,
        context,
        username=payload.username,
        password=payload.password,
        national_id=payload.national_id,
        birthdate=payload.birthdate,
        password_hint=payload.password_hint,
        require_identity=False,
    )
    await session.commit()
    logger.info("Initial administrator %s created", user.username)
    return user
