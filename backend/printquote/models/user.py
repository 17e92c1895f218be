"""User accounts and their server-side sessions."""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdMixin


class User(IdMixin, Base):
    """Login identity. The only entity that is not owner-scoped."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False)
    must_change_password: Mapped[bool] = mapped_column(Boolean, default=False)
    # identity proof required to reset an admin password
    national_id: Mapped[str | None] = mapped_column(String, nullable=True)
    birthdate: Mapped[str | None] = mapped_column(String, nullable=True)
    password_hint: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class AuthSession(IdMixin, Base):
    """Server-side session referenced by the signed cookie."""

    __tablename__ = "auth_sessions"

    __table_args__ = (Index("ix_auth_sessions_user", "user_id"),)

    user_id: Mapped[str] = mapped_column(String(36))
    username: Mapped[str] = mapped_column(String)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False)
    is_master_admin: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime)
