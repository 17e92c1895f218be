"""Database engine and session factory construction."""
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .config import Settings


def normalize_database_url(url: str) -> str:
    """Map bare driver URLs onto their async drivers."""

    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif url.startswith("sqlite:///"):
        url = url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database."""

    url = normalize_database_url(settings.database_url)
    connect_args = {"check_same_thread": False} if url.startswith("sqlite+") else {}
    return create_async_engine(url, future=True, echo=False, connect_args=connect_args)


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)
