# This project was developed with assistance from AI tools.
"""Integration tests: report aggregates and lead reassignment with real SQL."""

from decimal import Decimal

import pytest

from tests.functional.personas import (
    AGENT_BOB_USER_ID,
    AGENT_USER_ID,
    agent,
    manager,
    other_manager,
    super_admin,
)

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_manager_sales_report_covers_team(client_factory, seed_data):
    client = client_factory(manager())
    resp = await client.get("/api/reports/sales")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_policies"] == 3
    assert body["active_policies"] == 2
    assert Decimal(body["total_premium"]) == Decimal("660.50")
    assert str(seed_data.otto_active) not in {row["id"] for row in body["policies"]}
    await client.aclose()


@pytest.mark.asyncio
async def test_sales_report_filters_by_carrier_and_agent(client_factory, seed_data):
    client = client_factory(super_admin())
    resp = await client.get(
        "/api/reports/sales",
        params={"insurance_company": "Cigna", "agent_id": str(AGENT_BOB_USER_ID)},
    )
    body = resp.json()
    assert [row["id"] for row in body["policies"]] == [str(seed_data.jorge_active)]
    assert body["policies"][0]["agent_name"] == "Bob Salas"
    await client.aclose()


@pytest.mark.asyncio
async def test_team_performance_for_manager(client_factory, seed_data):
    client = client_factory(manager())
    resp = await client.get("/api/reports/team-performance", params={"days": 30})
    assert resp.status_code == 200
    by_name = {row["agent_name"]: row for row in resp.json()}
    assert set(by_name) == {"Alex Moreno", "Bob Salas"}
    assert by_name["Alex Moreno"]["total_policies"] == 2
    assert by_name["Alex Moreno"]["conversion_rate"] == 50.0
    assert Decimal(by_name["Bob Salas"]["total_premium"]) == Decimal("410.50")
    assert by_name["Bob Salas"]["conversion_rate"] == 100.0
    await client.aclose()


@pytest.mark.asyncio
async def test_other_manager_has_no_agents(client_factory, seed_data):
    client = client_factory(other_manager())
    resp = await client.get("/api/reports/team-performance")
    assert resp.json() == []
    await client.aclose()


@pytest.mark.asyncio
async def test_reassigned_lead_moves_between_books(client_factory, seed_data):
    mgr = client_factory(manager())
    resp = await mgr.put(
        f"/api/customers/{seed_data.jorge}/agent", json={"agent_id": str(AGENT_USER_ID)}
    )
    assert resp.status_code == 200
    await mgr.aclose()

    alex = client_factory(agent())
    resp = await alex.get(f"/api/customers/{seed_data.jorge}")
    assert resp.status_code == 200
    assert resp.json()["agent_id"] == str(AGENT_USER_ID)
    await alex.aclose()


@pytest.mark.asyncio
async def test_other_manager_cannot_take_lead(client_factory, seed_data):
    client = client_factory(other_manager())
    resp = await client.put(
        f"/api/customers/{seed_data.jorge}/agent", json={"agent_id": str(AGENT_USER_ID)}
    )
    assert resp.status_code == 404
    await client.aclose()
