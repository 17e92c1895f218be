"""Tests for the monthly commission report."""
from datetime import datetime
from types import SimpleNamespace

import pytest
from httpx import AsyncClient

from printquote.commissions import NO_SELLER_LABEL, build_commission_report, month_bounds
from printquote.models import Calculation

from conftest import hire


async def _quote(ctx, owner_id: str, price: float, status: str, when: datetime, employee: dict | None = None) -> None:
    async with ctx.sessionmaker() as session:
        session.add(
            Calculation(
                owner_id=owner_id,
                date=when,
                client_name="ACME",
                project_name="Job",
                total_cost=price / 2,
                suggested_price=price,
                status=status,
                employee_id=employee["id"] if employee else None,
                employee_name=employee["name"] if employee else None,
                details={},
            )
        )
        await session.commit()


def test_month_bounds_are_inclusive() -> None:
    start, end = month_bounds(2024, 2)

    assert start == datetime(2024, 2, 1)
    assert end == datetime(2024, 2, 29, 23, 59, 59, 999999)


def test_report_groups_and_sorts_by_revenue() -> None:
    employees = {"e1": SimpleNamespace(name="Rita", commission_rate_percent=10)}
    calcs = [
        SimpleNamespace(id="q1", status="confirmed", date=datetime(2024, 4, 2), employee_id="e1", employee_name="Rita", suggested_price=100.0),
        SimpleNamespace(id="q2", status="confirmed", date=datetime(2024, 4, 30, 23, 59), employee_id=None, employee_name=None, suggested_price=250.0),
        SimpleNamespace(id="q3", status="confirmed", date=datetime(2024, 5, 1), employee_id="e1", employee_name="Rita", suggested_price=999.0),
        SimpleNamespace(id="q4", status="pending", date=datetime(2024, 4, 3), employee_id="e1", employee_name="Rita", suggested_price=999.0),
    ]

    report = build_commission_report(calcs, employees, 2024, 4)

    assert [group.seller_name for group in report.groups] == [NO_SELLER_LABEL, "Rita"]
    assert report.groups[1].commission == 10.0
    assert report.groups[1].quote_ids == ["q1"]
    assert report.groups[0].rate == 0
    assert report.quote_count == 2
    assert report.gross_revenue == 350.0
    assert report.commission == 10.0


@pytest.mark.asyncio
async def test_only_confirmed_quotes_earn_commission(master: AsyncClient, ctx) -> None:
    owner_id = (await master.get("/api/auth/me")).json()["id"]
    seller = await hire(master, "Rita", rate=10)
    april = datetime(2024, 4, 12, 15, 0)
    await _quote(ctx, owner_id, 100, "confirmed", april, seller)
    await _quote(ctx, owner_id, 200, "pending", april, seller)
    await _quote(ctx, owner_id, 300, "denied", april, seller)
    await _quote(ctx, owner_id, 400, "confirmed", datetime(2024, 3, 31, 23, 0), seller)

    report = await master.get("/api/commissions", params={"year": 2024, "month": 4})

    assert report.status_code == 200
    body = report.json()
    assert body["grossRevenue"] == 100
    assert body["commission"] == 10
    assert body["quoteCount"] == 1
    assert body["groups"] == [
        {
            "employeeId": seller["id"],
            "sellerName": "Rita",
            "quoteCount": 1,
            "grossRevenue": 100,
            "rate": 10,
            "commission": 10,
            "quoteIds": body["groups"][0]["quoteIds"],
        }
    ]


@pytest.mark.asyncio
async def test_deleted_seller_keeps_name_and_earns_nothing(master: AsyncClient, ctx) -> None:
    owner_id = (await master.get("/api/auth/me")).json()["id"]
    seller = await hire(master, "Rita", rate=10)
    await _quote(ctx, owner_id, 150, "confirmed", datetime(2024, 4, 5), seller)
    await master.delete(f"/api/employees/{seller['id']}")

    body = (await master.get("/api/commissions", params={"year": 2024, "month": 4})).json()

    assert body["groups"][0]["sellerName"] == "Rita"
    assert body["groups"][0]["rate"] == 0
    assert body["groups"][0]["commission"] == 0
    assert body["grossRevenue"] == 150


@pytest.mark.asyncio
async def test_rate_is_read_at_report_time(master: AsyncClient, ctx) -> None:
    owner_id = (await master.get("/api/auth/me")).json()["id"]
    seller = await hire(master, "Rita", rate=10)
    await _quote(ctx, owner_id, 200, "confirmed", datetime(2024, 4, 5), seller)
    await master.patch(f"/api/employees/{seller['id']}", json={"commissionRatePercent": 12.5})

    body = (await master.get("/api/commissions", params={"year": 2024, "month": 4})).json()

    assert body["commission"] == 25


@pytest.mark.asyncio
async def test_filter_by_employee_or_no_seller(master: AsyncClient, ctx) -> None:
    owner_id = (await master.get("/api/auth/me")).json()["id"]
    rita = await hire(master, "Rita", rate=10)
    paulo = await hire(master, "Paulo", rate=20)
    when = datetime(2024, 4, 5)
    await _quote(ctx, owner_id, 100, "confirmed", when, rita)
    await _quote(ctx, owner_id, 300, "confirmed", when, paulo)
    await _quote(ctx, owner_id, 50, "confirmed", when)

    everyone = (await master.get("/api/commissions", params={"year": 2024, "month": 4})).json()
    only_rita = (
        await master.get("/api/commissions", params={"year": 2024, "month": 4, "employeeId": rita["id"]})
    ).json()
    no_seller = (
        await master.get("/api/commissions", params={"year": 2024, "month": 4, "employeeId": "none"})
    ).json()

    assert [g["sellerName"] for g in everyone["groups"]] == ["Paulo", "Rita", "No seller"]
    assert everyone["commission"] == 70
    assert [g["sellerName"] for g in only_rita["groups"]] == ["Rita"]
    assert [g["sellerName"] for g in no_seller["groups"]] == ["No seller"]


@pytest.mark.asyncio
async def test_seller_sees_only_their_own_group(master: AsyncClient, make_client, clock) -> None:
    rita = await hire(master, "Rita", rate=10)
    await hire(master, "Paulo", rate=20)
    session = await make_client(rita["generatedUsername"], rita["generatedPassword"])
    quote = (await session.post("/api/calculations", json={"projectName": "Keychain"})).json()
    await master.patch(f"/api/calculations/{quote['id']}/status", json={"status": "confirmed"})

    mine = (await session.get("/api/commissions")).json()
    admin_view = (await master.get("/api/commissions")).json()

    assert (mine["year"], mine["month"]) == (clock().year, clock().month)
    assert [g["sellerName"] for g in mine["groups"]] == ["Rita"]
    assert admin_view["quoteCount"] == 1


@pytest.mark.asyncio
async def test_invalid_month_is_rejected(master: AsyncClient) -> None:
    response = await master.get("/api/commissions", params={"year": 2024, "month": 13})

    assert response.status_code == 400
