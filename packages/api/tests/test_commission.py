# This project was developed with assistance from AI tools.
"""Tests for commission calculation and batch creation."""

import uuid
from collections import namedtuple
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from db import CommissionBatch
from db.enums import BatchStatus, UserRole
from sqlalchemy.exc import IntegrityError

from policydesk.services.commission import (
    CommissionConflictError,
    calculate_commission,
    create_commission_batch,
)

from .factories import make_user_context

_PolicyRow = namedtuple("_PolicyRow", ["id", "monthly_premium", "created_by_agent_id"])


@pytest.mark.parametrize(
    ("premium", "expected"),
    [
        ("250.00", Decimal("25.00")),
        (Decimal("199.99"), Decimal("20.00")),
        (Decimal("0.05"), Decimal("0.01")),
        (None, Decimal("0.00")),
    ],
)
def test_calculate_commission(premium, expected):
    assert calculate_commission(premium) == expected


def _result(rows=None):
    result = MagicMock()
    result.all.return_value = rows or []
    result.first.return_value = None
    return result


def _make_session(rows):
    """Session whose first execute returns the selected policy rows."""
    session = AsyncMock()
    session.add = MagicMock()
    session.add_all = MagicMock()
    session.execute = AsyncMock(side_effect=[_result(rows), _result(), _result()])
    return session


@pytest.mark.asyncio
async def test_single_policy_batch():
    agent_id = uuid.uuid4()
    policy_id = uuid.uuid4()
    session = _make_session([_PolicyRow(policy_id, Decimal("250.00"), agent_id)])
    analyst = make_user_context(UserRole.COMMISSION_ANALYST)

    await create_commission_batch(session, analyst, "February 2026", [policy_id])

    [batch] = [c.args[0] for c in session.add.call_args_list]
    assert isinstance(batch, CommissionBatch)
    assert batch.status == BatchStatus.PENDING_APPROVAL
    assert batch.created_by_analyst_id == analyst.user_id

    [records] = [c.args[0] for c in session.add_all.call_args_list]
    assert len(records) == 1
    assert records[0].commission_amount == Decimal("25.00")
    assert records[0].agent_id == agent_id
    assert records[0].policy_id == policy_id
    session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_overlapping_batch_rolls_back():
    policy_id = uuid.uuid4()
    session = _make_session([_PolicyRow(policy_id, Decimal("100.00"), uuid.uuid4())])
    session.flush = AsyncMock(
        side_effect=[None, IntegrityError("INSERT", {}, Exception("duplicate key"))]
    )

    with pytest.raises(CommissionConflictError):
        await create_commission_batch(
            session, make_user_context(UserRole.COMMISSION_ANALYST), "March 2026", [policy_id]
        )

    session.rollback.assert_awaited_once()
    session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_no_matching_policies_returns_none():
    session = _make_session([])

    result = await create_commission_batch(
        session, make_user_context(UserRole.SUPER_ADMIN), "March 2026", [uuid.uuid4()]
    )

    assert result is None
    session.rollback.assert_awaited_once()
    session.add_all.assert_not_called()
