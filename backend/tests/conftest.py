"""Test fixtures for the backend."""
import random
from datetime import datetime, timedelta
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from printquote import models
from printquote.config import Settings
from printquote.context import AppContext
from printquote.main import create_app
from printquote.models import User
from printquote.services.accounts import seed_materials

MASTER_USERNAME = "master"
MASTER_PASSWORD = "master-pass"


class FakeClock:
    """Deterministic stand-in for ``datetime.now``."""

    def __init__(self, start: datetime = datetime(2024, 4, 10, 9, 0, 0)) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now += timedelta(**delta)


class Upstream:
    """Routes outbound HTTP requests to a handler chosen by the test."""

    def __init__(self) -> None:
        self.handler = lambda request: httpx.Response(503)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> Upstream:
    return Upstream()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        secret_key="test-secret",
        master_admin_username=MASTER_USERNAME,
    )


@pytest_asyncio.fixture
async def app(settings: Settings, clock: FakeClock, upstream: Upstream):
    """A fresh application over an empty database."""

    application = create_app(
        settings,
        clock=clock,
        rng=random.Random(1234),
        http_transport=httpx.MockTransport(upstream),
    )
    context = application.state.context
    async with context.engine.begin() as conn:
        await conn.run_sync(models.Base.metadata.create_all)
    yield application
    await context.engine.dispose()


@pytest.fixture
def ctx(app) -> AppContext:
    return app.state.context


@pytest_asyncio.fixture
async def make_client(app):
    """Factory for HTTP clients, optionally logged in as a given user."""

    clients: list[AsyncClient] = []

    async def factory(username: str | None = None, password: str | None = None) -> AsyncClient:
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")
        clients.append(client)
        if username is not None:
            response = await client.post(
                "/api/auth/login", json={"username": username, "password": password}
            )
            assert response.status_code == 200, response.text
        return client

    yield factory
    for client in clients:
        await client.aclose()


@pytest.fixture
def make_user(ctx: AppContext, clock: FakeClock):
    """Insert a user directly; each call is one second newer than the last."""

    async def factory(
        username: str,
        password: str = "secret1",
        *,
        is_admin: bool = False,
        national_id: str | None = None,
        birthdate: str | None = None,
        password_hint: str | None = None,
        must_change_password: bool = False,
    ) -> User:
        async with ctx.sessionmaker() as session:
            user = User(
                username=username,
                password_hash=ctx.hasher.hash(password),
                is_admin=is_admin,
                national_id=national_id,
                birthdate=birthdate,
                password_hint=password_hint,
                must_change_password=must_change_password,
                created_at=clock(),
            )
            session.add(user)
            await session.flush()
            await seed_materials(session, user.id)
            await session.commit()
        clock.advance(seconds=1)
        return user

    return factory


@pytest_asyncio.fixture
async def master(make_user, make_client) -> AsyncClient:
    """Logged-in client of the master administrator."""

    await make_user(
        MASTER_USERNAME,
        MASTER_PASSWORD,
        is_admin=True,
        national_id="12345678900",
        birthdate="1980-05-01",
    )
    return await make_client(MASTER_USERNAME, MASTER_PASSWORD)


@pytest_asyncio.fixture
async def admin(master, make_user, make_client) -> AsyncClient:
    """Logged-in client of a second, non-master administrator."""

    await make_user("alice", "alice-pass", is_admin=True)
    return await make_client("alice", "alice-pass")


async def hire(client: AsyncClient, name: str, rate: float = 10.0) -> dict:
    """Create an employee through the API and return the response body."""

    response = await client.post(
        "/api/employees", json={"name": name, "commissionRatePercent": rate}
    )
    assert response.status_code == 201, response.text
    return response.json()


async def add_stock(
    client: AsyncClient, *, unit_cost: float = 80.0, grams: float = 1000.0, color: str = "Black"
) -> dict:
    """Create a material and one roll of it; returns the stock item."""

    material = await client.post("/api/materials", json={"name": "PLA", "costPerKg": unit_cost})
    assert material.status_code == 201, material.text
    item = await client.post(
        "/api/stock-items",
        json={
            "materialId": material.json()["id"],
            "brand": "Acme",
            "color": color,
            "unitCost": unit_cost,
            "remainingGrams": grams,
        },
    )
    assert item.status_code == 201, item.text
    return item.json()
