# This project was developed with assistance from AI tools.
"""Integration tests: data scope filtering with real SQL."""

import pytest

from tests.functional.personas import (
    agent,
    agent_bob,
    call_center,
    manager,
    other_manager,
    processor,
    super_admin,
)

pytestmark = pytest.mark.integration


async def _policy_ids(client, path="/api/policies/") -> set[str]:
    resp = await client.get(path)
    assert resp.status_code == 200
    return {row["id"] for row in resp.json()["data"]}


@pytest.mark.asyncio
async def test_agent_sees_only_own_customers(client_factory, seed_data):
    client = client_factory(agent())
    ids = await _policy_ids(client)
    assert ids == {str(seed_data.lucia_active), str(seed_data.lucia_new)}
    await client.aclose()


@pytest.mark.asyncio
async def test_agent_cannot_open_other_agents_policy(client_factory, seed_data):
    client = client_factory(agent_bob())
    resp = await client.get(f"/api/policies/{seed_data.lucia_active}")
    assert resp.status_code == 404
    await client.aclose()


@pytest.mark.asyncio
async def test_manager_sees_direct_reports(client_factory, seed_data):
    client = client_factory(manager())
    ids = await _policy_ids(client)
    assert ids == {
        str(seed_data.lucia_active),
        str(seed_data.lucia_new),
        str(seed_data.jorge_active),
    }
    await client.aclose()


@pytest.mark.asyncio
async def test_other_manager_sees_own_customers_only(client_factory, seed_data):
    client = client_factory(other_manager())
    ids = await _policy_ids(client)
    assert ids == {str(seed_data.otto_active)}
    await client.aclose()


@pytest.mark.asyncio
async def test_processor_list_is_assignments(client_factory, seed_data):
    client = client_factory(processor())
    ids = await _policy_ids(client)
    assert ids == {str(seed_data.lucia_active)}
    await client.aclose()


@pytest.mark.asyncio
async def test_processor_queue_includes_unassigned_team_policies(client_factory, seed_data):
    client = client_factory(processor())
    ids = await _policy_ids(client, "/api/processing/")
    assert ids == {
        str(seed_data.lucia_active),
        str(seed_data.lucia_new),
        str(seed_data.jorge_active),
    }
    await client.aclose()


@pytest.mark.asyncio
async def test_super_admin_sees_everything(client_factory, seed_data):
    client = client_factory(super_admin())
    ids = await _policy_ids(client)
    assert len(ids) == 4
    await client.aclose()


@pytest.mark.asyncio
async def test_call_center_sees_pipeline_redacted_after_sale(client_factory, seed_data):
    client = client_factory(call_center())
    assert len(await _policy_ids(client)) == 4

    active = await client.get(f"/api/policies/{seed_data.lucia_active}")
    assert active.status_code == 200
    assert active.json()["customer_email"] == "Restringido"

    lead = await client.get(f"/api/policies/{seed_data.lucia_new}")
    assert lead.json()["customer_email"] == "lucia@example.com"
    await client.aclose()
