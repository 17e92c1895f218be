"""Integration tests for the quote lifecycle and quote visibility."""
import pytest
from httpx import AsyncClient

from conftest import add_stock, hire


def _line(stock_item_id: str | None = None, **overrides) -> dict:
    line = {"description": "Part", "stockItemId": stock_item_id, "grams": 100, "hours": 2, "minutes": 30, "qty": 1}
    line.update(overrides)
    return line


async def _stock_left(client: AsyncClient, stock_item_id: str) -> float:
    items = (await client.get("/api/stock-items")).json()
    return next(item["remainingGrams"] for item in items if item["id"] == stock_item_id)


@pytest.mark.asyncio
async def test_save_recomputes_totals_on_the_server(master: AsyncClient, clock) -> None:
    stock = await add_stock(master, unit_cost=80)

    saved = await master.post(
        "/api/calculations",
        json={
            "clientName": "ACME",
            "projectName": "Bracket",
            "items": [_line(stock["id"])],
            "totalCost": 1,
            "suggestedPrice": 1,
            "ownerId": "someone-else",
        },
    )

    assert saved.status_code == 201
    body = saved.json()
    assert body["totalCost"] == 21.34
    assert body["suggestedPrice"] == 42.68
    assert body["status"] == "pending"
    assert body["ownerId"] == (await master.get("/api/auth/me")).json()["id"]
    assert body["date"].startswith(clock().isoformat()[:16])
    assert body["details"]["profitMarginPercent"] == 100
    assert body["details"]["items"][0]["stockItemId"] == stock["id"]
    assert body["stockAlerts"] == []


@pytest.mark.asyncio
async def test_editor_details_are_passed_through(master: AsyncClient) -> None:
    saved = await master.post(
        "/api/calculations",
        json={"projectName": "Vase", "details": {"notes": "matte finish", "layout": [1, 2]}},
    )

    details = saved.json()["details"]
    assert details["notes"] == "matte finish"
    assert details["layout"] == [1, 2]
    assert details["items"] == []
    assert saved.json()["clientName"] == "Unidentified client"


@pytest.mark.asyncio
async def test_missing_project_name_is_rejected(master: AsyncClient) -> None:
    response = await master.post("/api/calculations", json={"clientName": "ACME"})

    assert response.status_code == 400
    assert "message" in response.json()


@pytest.mark.asyncio
async def test_save_decrements_stock_and_reports_low_rolls(master: AsyncClient) -> None:
    plenty = await add_stock(master, grams=1000, color="White")
    scarce = await add_stock(master, grams=250, color="Red")

    saved = await master.post(
        "/api/calculations",
        json={
            "projectName": "Set",
            "items": [
                _line(plenty["id"], grams=100, qty=2),
                _line(scarce["id"], grams=100, qty=1),
                _line(scarce["id"], grams=100, qty=1),
            ],
        },
    )

    assert await _stock_left(master, plenty["id"]) == 800
    assert await _stock_left(master, scarce["id"]) == 50
    alerts = saved.json()["stockAlerts"]
    assert alerts == [
        {
            "stockItemId": scarce["id"],
            "materialName": "PLA",
            "brand": "Acme",
            "color": "Red",
            "remainingGrams": 50,
            "kind": "low",
        }
    ]


@pytest.mark.asyncio
async def test_stock_may_go_negative(master: AsyncClient) -> None:
    stock = await add_stock(master, grams=30)

    saved = await master.post(
        "/api/calculations", json={"projectName": "Big", "items": [_line(stock["id"], grams=100)]}
    )

    assert saved.status_code == 201
    assert await _stock_left(master, stock["id"]) == -70
    assert saved.json()["stockAlerts"][0]["kind"] == "depleted"


@pytest.mark.asyncio
async def test_update_keeps_date_and_stock(master: AsyncClient, clock) -> None:
    stock = await add_stock(master, grams=1000)
    saved = (
        await master.post(
            "/api/calculations", json={"projectName": "Gear", "items": [_line(stock["id"])]}
        )
    ).json()
    clock.advance(days=3)

    updated = await master.patch(
        f"/api/calculations/{saved['id']}",
        json={"projectName": "Gear v2", "profitMarginPercent": 50},
    )

    assert updated.status_code == 200
    body = updated.json()
    assert body["date"] == saved["date"]
    assert body["projectName"] == "Gear v2"
    assert body["totalCost"] == 21.34
    assert body["suggestedPrice"] == 32.01
    assert body["details"]["profitMarginPercent"] == 50
    assert await _stock_left(master, stock["id"]) == 900


@pytest.mark.asyncio
async def test_reprice_uses_margin_saved_with_the_quote(master: AsyncClient) -> None:
    saved = (
        await master.post(
            "/api/calculations",
            json={"projectName": "Gear", "items": [_line(hours=1, minutes=0, grams=0)]},
        )
    ).json()
    await master.patch("/api/settings", json={"profitMarginPercent": 300})

    updated = await master.patch(
        f"/api/calculations/{saved['id']}",
        json={"items": [_line(hours=2, minutes=0, grams=0)]},
    )

    assert updated.json()["details"]["profitMarginPercent"] == 100
    assert updated.json()["suggestedPrice"] == round(saved["suggestedPrice"] * 2, 2)


@pytest.mark.asyncio
async def test_status_change_is_idempotent(master: AsyncClient) -> None:
    saved = (await master.post("/api/calculations", json={"projectName": "Gear"})).json()

    first = await master.patch(f"/api/calculations/{saved['id']}/status", json={"status": "confirmed"})
    second = await master.patch(f"/api/calculations/{saved['id']}/status", json={"status": "confirmed"})
    invalid = await master.patch(f"/api/calculations/{saved['id']}/status", json={"status": "won"})

    assert first.json() == second.json()
    assert second.json()["status"] == "confirmed"
    assert invalid.status_code == 400


@pytest.mark.asyncio
async def test_delete_does_not_restore_stock(master: AsyncClient) -> None:
    stock = await add_stock(master, grams=1000)
    saved = (
        await master.post("/api/calculations", json={"projectName": "Gear", "items": [_line(stock["id"])]})
    ).json()

    deleted = await master.delete(f"/api/calculations/{saved['id']}")

    assert deleted.json() == {"ok": True}
    assert (await master.get("/api/calculations")).json() == []
    assert await _stock_left(master, stock["id"]) == 900


@pytest.mark.asyncio
async def test_consume_stock_reissues_decrements(master: AsyncClient) -> None:
    stock = await add_stock(master, grams=400)
    saved = (
        await master.post("/api/calculations", json={"projectName": "Gear", "items": [_line(stock["id"])]})
    ).json()

    consumed = await master.post(f"/api/calculations/{saved['id']}/consume-stock")

    assert consumed.status_code == 200
    assert await _stock_left(master, stock["id"]) == 200
    assert consumed.json()["stockAlerts"][0]["kind"] == "low"


@pytest.mark.asyncio
async def test_preview_prices_without_saving(master: AsyncClient) -> None:
    stock = await add_stock(master, unit_cost=80, grams=1000)

    preview = await master.post(
        "/api/calculations/preview", json={"items": [_line(stock["id"])]}
    )

    assert preview.status_code == 200
    body = preview.json()
    assert body["suggestedPrice"] == 42.68
    assert body["lines"][0]["lineTotal"] == 42.68
    assert body["materialCost"] == 8.0
    assert (await master.get("/api/calculations")).json() == []
    assert await _stock_left(master, stock["id"]) == 1000


@pytest.mark.asyncio
async def test_preview_survives_huge_quantities(master: AsyncClient) -> None:
    preview = await master.post(
        "/api/calculations/preview", json={"items": [{"grams": 1e22, "hours": 1e20}]}
    )

    assert preview.status_code == 200
    assert preview.json()["suggestedPrice"] > 0


@pytest.mark.asyncio
async def test_admin_sees_quotes_of_their_employees(master: AsyncClient, admin: AsyncClient, make_client) -> None:
    employee = await hire(master, "Rita", rate=10)
    rita = await make_client(employee["generatedUsername"], employee["generatedPassword"])

    quote = await rita.post("/api/calculations", json={"projectName": "Keychain"})
    assert quote.status_code == 201
    assert quote.json()["employeeId"] == employee["id"]
    assert quote.json()["employeeName"] == "Rita"
    own = await master.post("/api/calculations", json={"projectName": "Lamp"})

    master_view = {row["id"] for row in (await master.get("/api/calculations")).json()}
    alice_view = (await admin.get("/api/calculations")).json()
    rita_view = {row["id"] for row in (await rita.get("/api/calculations")).json()}

    assert master_view == {quote.json()["id"], own.json()["id"]}
    assert alice_view == []
    assert rita_view == {quote.json()["id"]}

    confirmed = await master.patch(
        f"/api/calculations/{quote.json()['id']}/status", json={"status": "confirmed"}
    )
    assert confirmed.status_code == 200
    foreign = await admin.patch(
        f"/api/calculations/{quote.json()['id']}/status", json={"status": "denied"}
    )
    assert foreign.status_code == 404
    assert (await rita.delete(f"/api/calculations/{own.json()['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_admin_reprices_and_deletes_employee_quotes(master: AsyncClient, admin: AsyncClient, make_client) -> None:
    employee = await hire(master, "Rita", rate=10)
    rita = await make_client(employee["generatedUsername"], employee["generatedPassword"])
    quote_id = (await rita.post("/api/calculations", json={"projectName": "Keychain"})).json()["id"]
    assert (await master.patch("/api/settings", json={"laborCostPerHour": 50})).status_code == 200
    items = [{"description": "Ring", "hours": 1}]

    repriced = await master.patch(f"/api/calculations/{quote_id}", json={"items": items})
    rita_preview = await rita.post("/api/calculations/preview", json={"items": items})
    master_preview = await master.post("/api/calculations/preview", json={"items": items})

    assert repriced.status_code == 200
    assert repriced.json()["suggestedPrice"] == rita_preview.json()["suggestedPrice"]
    assert repriced.json()["suggestedPrice"] != master_preview.json()["suggestedPrice"]

    assert (await admin.patch(f"/api/calculations/{quote_id}", json={"items": items})).status_code == 404
    assert (await admin.delete(f"/api/calculations/{quote_id}")).status_code == 404
    assert (await master.delete(f"/api/calculations/{quote_id}")).json() == {"ok": True}
    assert (await rita.get("/api/calculations")).json() == []


@pytest.mark.asyncio
async def test_quote_seller_must_be_visible(master: AsyncClient, admin: AsyncClient) -> None:
    employee = await hire(master, "Rita")

    mine = await master.post(
        "/api/calculations", json={"projectName": "Lamp", "employeeId": employee["id"]}
    )
    foreign = await admin.post(
        "/api/calculations", json={"projectName": "Lamp", "employeeId": employee["id"]}
    )

    assert mine.json()["employeeName"] == "Rita"
    assert foreign.status_code == 400


@pytest.mark.asyncio
async def test_unknown_quote_is_not_found(master: AsyncClient) -> None:
    assert (await master.patch("/api/calculations/missing", json={"projectName": "x"})).status_code == 404
    assert (await master.delete("/api/calculations/missing")).status_code == 404
