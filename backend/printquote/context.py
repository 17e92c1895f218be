"""Explicit application context handed to every request handler.

Handlers never reach for module-level singletons: the engine, the session
factory, the clock, the random source used for temporary passwords, the
password hasher and the outbound HTTP transport all travel on one
``AppContext`` stored on ``app.state.context``.
"""
from __future__ import annotations

import random
import secrets
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

import httpx
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from .config import Settings
from .database import build_engine, build_sessionmaker
from .security import PasswordHasher


def _local_now() -> datetime:
    return datetime.now()


@dataclass
class AppContext:
    """Everything a handler needs besides the request itself."""

    settings: Settings
    engine: AsyncEngine
    sessionmaker: async_sessionmaker[AsyncSession]
    clock: Callable[[], datetime] = _local_now
    rng: random.Random = field(default_factory=secrets.SystemRandom)
    hasher: PasswordHasher = field(default_factory=PasswordHasher)
    http_transport: httpx.AsyncBaseTransport | None = None

    @property
    def master_admin_username(self) -> str:
        return self.settings.master_admin_username

    def is_master_admin(self, username: str) -> bool:
        return username == self.settings.master_admin_username


def build_context(
    settings: Settings,
    *,
    clock: Callable[[], datetime] | None = None,
    rng: random.Random | None = None,
    hasher: PasswordHasher | None = None,
    http_transport: httpx.AsyncBaseTransport | None = None,
) -> AppContext:
    """Assemble a context, creating the engine from the settings."""

    engine = build_engine(settings)
    context = AppContext(
        settings=settings,
        engine=engine,
        sessionmaker=build_sessionmaker(engine),
        http_transport=http_transport,
    )
    if clock is not None:
        context.clock = clock
    if rng is not None:
        context.rng = rng
    if hasher is not None:
        context.hasher = hasher
    return context
