# This project was developed with assistance from AI tools.
"""Functional tests: commission eligibility, batches and approval RBAC."""

import uuid
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from db.enums import BatchStatus

from policydesk.services.commission import CommissionConflictError

from .data_factory import POLICY_LUCIA_ACTIVE_ID, agent_alex, customer_lucia, policy_lucia_active
from .mock_db import make_mock_session
from .personas import ANALYST_USER_ID, agent, commission_analyst, manager, super_admin

pytestmark = pytest.mark.functional

_BATCH_ID = uuid.UUID("30000000-0000-4000-8000-000000000001")


def _make_batch(status: BatchStatus = BatchStatus.PENDING_APPROVAL) -> MagicMock:
    analyst = MagicMock()
    analyst.full_name = "Nora Campos"
    b = MagicMock()
    b.id = _BATCH_ID
    b.period_description = "February 2026"
    b.status = status
    b.created_by_analyst_id = ANALYST_USER_ID
    b.created_by = analyst
    b.approved_by_id = None
    b.approved_by = None
    b.approved_at = None
    b.created_at = datetime(2026, 3, 1, tzinfo=UTC)
    return b


class TestEligible:
    def test_analyst_lists_eligible_with_estimate(self, make_client):
        rows = [(policy_lucia_active(), customer_lucia(), agent_alex())]
        client = make_client(commission_analyst(), make_mock_session(count=1, rows=rows))

        resp = client.get("/api/commissions/eligible")
        assert resp.status_code == 200
        item = resp.json()["data"][0]
        assert item["policy_id"] == str(POLICY_LUCIA_ACTIVE_ID)
        assert item["agent_name"] == "Alex Moreno"
        assert Decimal(item["estimated_commission"]) == Decimal("25.00")

    def test_agent_cannot_see_eligible(self, make_client):
        client = make_client(agent(), make_mock_session())

        resp = client.get("/api/commissions/eligible")
        assert resp.status_code == 403


class TestBatches:
    @patch("policydesk.services.commission.create_commission_batch", new_callable=AsyncMock)
    def test_create_batch(self, mock_create, make_client):
        mock_create.return_value = (_make_batch(), 1, Decimal("25.00"))
        client = make_client(commission_analyst(), make_mock_session())

        resp = client.post(
            "/api/commissions/batches",
            json={
                "period_description": "February 2026",
                "policy_ids": [str(POLICY_LUCIA_ACTIVE_ID)],
            },
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["status"] == "pending_approval"
        assert body["record_count"] == 1
        assert Decimal(body["total_amount"]) == Decimal("25.00")
        assert body["created_by_name"] == "Nora Campos"

    @patch("policydesk.services.commission.create_commission_batch", new_callable=AsyncMock)
    def test_overlapping_batch_is_409(self, mock_create, make_client):
        mock_create.side_effect = CommissionConflictError("already commissioned")
        client = make_client(commission_analyst(), make_mock_session())

        resp = client.post(
            "/api/commissions/batches",
            json={"period_description": "March 2026", "policy_ids": [str(POLICY_LUCIA_ACTIVE_ID)]},
        )
        assert resp.status_code == 409
        assert resp.json()["title"] == "Conflict"

    @patch("policydesk.services.commission.create_commission_batch", new_callable=AsyncMock)
    def test_unknown_policies_is_404(self, mock_create, make_client):
        mock_create.return_value = None
        client = make_client(super_admin(), make_mock_session())

        resp = client.post(
            "/api/commissions/batches",
            json={"period_description": "March 2026", "policy_ids": [str(uuid.uuid4())]},
        )
        assert resp.status_code == 404

    def test_empty_selection_is_422(self, make_client):
        client = make_client(commission_analyst(), make_mock_session())

        resp = client.post(
            "/api/commissions/batches",
            json={"period_description": "March 2026", "policy_ids": []},
        )
        assert resp.status_code == 422
        assert resp.json()["errors"][0]["loc"][-1] == "policy_ids"

    def test_manager_cannot_create_batch(self, make_client):
        client = make_client(manager(), make_mock_session())

        resp = client.post(
            "/api/commissions/batches",
            json={"period_description": "March 2026", "policy_ids": [str(uuid.uuid4())]},
        )
        assert resp.status_code == 403

    def test_manager_lists_batches(self, make_client):
        session = make_mock_session(count=1, rows=[(_make_batch(), 2, Decimal("40.00"))])
        client = make_client(manager(), session)

        resp = client.get("/api/commissions/batches")
        assert resp.status_code == 200
        data = resp.json()
        assert data["pagination"]["total"] == 1
        assert data["data"][0]["record_count"] == 2


class TestApproval:
    def test_manager_approves(self, make_client):
        batch = _make_batch()
        session = make_mock_session(get=batch, rows=[(batch, 1, Decimal("25.00"))])
        client = make_client(manager(), session)

        resp = client.post(f"/api/commissions/batches/{_BATCH_ID}/approve")
        assert resp.status_code == 200
        assert batch.status == BatchStatus.APPROVED
        assert batch.approved_by_id is not None
        session.commit.assert_awaited_once()

    def test_analyst_cannot_approve(self, make_client):
        client = make_client(commission_analyst(), make_mock_session(get=_make_batch()))

        resp = client.post(f"/api/commissions/batches/{_BATCH_ID}/approve")
        assert resp.status_code == 403

    def test_unknown_batch_is_404(self, make_client):
        client = make_client(super_admin(), make_mock_session(get=None))

        resp = client.post(f"/api/commissions/batches/{_BATCH_ID}/approve")
        assert resp.status_code == 404
