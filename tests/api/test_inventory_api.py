# tests/api/test_inventory_api.py
from __future__ import annotations

import pytest


@pytest.mark.asyncio
async def test_warehouse_inventory(client, actor_headers, seed):
    await client.post(
        "/transactions",
        json={
            "type": "INBOUND",
            "items": [
                {"warehouse_id": 2, "item_id": 1, "quantity": 100},
                {"warehouse_id": 2, "item_id": 2, "quantity": 25},
            ],
        },
        headers=actor_headers(),
    )

    resp = await client.get("/warehouses/2/inventory", headers=actor_headers())

    assert resp.status_code == 200
    body = resp.json()
    assert (body["capacity"], body["used"], body["available"]) == (500, 125, 375)
    assert {r["item"]["sku"]: r["quantity"] for r in body["rows"]} == {"WID-001": 100, "BLT-002": 25}


@pytest.mark.asyncio
async def test_foreign_warehouse_inventory_is_404(client, actor_headers, seed):
    resp = await client.get("/warehouses/3/inventory", headers=actor_headers())
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_healthz_and_metrics(client):
    assert (await client.get("/healthz")).json() == {"status": "ok"}
    metrics = await client.get("/metrics")
    assert metrics.status_code == 200
    assert "inventory_transactions_total" in metrics.text
