# This project was developed with assistance from AI tools.
"""Tests for policy change audit tasks."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

from db import CustomerTask
from db.enums import PolicyStatus, TaskStatus, TaskType, UserRole

from policydesk.services.audit import (
    POLICY_UPDATE_TITLE,
    describe_changes,
    diff_snapshots,
    record_policy_change,
    snapshot,
)

from .factories import make_policy_stub, make_user_context


def _policy(**overrides):
    fields = {
        "insurance_company": "Aetna",
        "monthly_premium": Decimal("250.00"),
        "marketplace_id": "MKT-1",
        "effective_date": date(2026, 3, 1),
    }
    fields.update(overrides)
    return make_policy_stub(PolicyStatus.IN_REVIEW, **fields)


def test_carrier_change_writes_one_task():
    session = MagicMock()
    user = make_user_context(UserRole.AGENT)
    policy = _policy()
    before = snapshot(policy)

    policy.insurance_company = "Cigna"
    task = record_policy_change(session, user, policy, before)

    session.add.assert_called_once_with(task)
    assert isinstance(task, CustomerTask)
    assert "Aetna" in task.description
    assert "Cigna" in task.description
    assert task.title == POLICY_UPDATE_TITLE
    assert task.type == TaskType.GENERAL
    assert task.status == TaskStatus.COMPLETED
    assert task.completed_at is not None
    assert task.customer_id == policy.customer_id
    assert task.policy_id == policy.id
    assert task.created_by_id == user.user_id


def test_no_change_writes_nothing():
    session = MagicMock()
    policy = _policy()
    before = snapshot(policy)

    assert record_policy_change(session, make_user_context(UserRole.AGENT), policy, before) is None
    session.add.assert_not_called()


def test_untracked_field_is_ignored():
    session = MagicMock()
    policy = _policy(notes="first")
    before = snapshot(policy)
    policy.notes = "second"

    assert record_policy_change(session, make_user_context(UserRole.AGENT), policy, before) is None


def test_always_writes_even_without_diff():
    session = MagicMock()
    policy = _policy()
    task = record_policy_change(
        session,
        make_user_context(UserRole.MANAGER),
        policy,
        snapshot(policy),
        title="Editing enabled by supervisor",
        always=True,
    )
    assert task.title == "Editing enabled by supervisor"
    assert task.description == "No tracked field changed."


def test_equal_decimals_are_not_a_change():
    before = {"monthly_premium": Decimal("250")}
    after = {"monthly_premium": Decimal("250.00")}
    assert diff_snapshots(before, after) == []


def test_enum_and_string_compare_equal():
    assert diff_snapshots({"status": PolicyStatus.ACTIVE}, {"status": "active"}) == []


def test_describe_changes_formats_values():
    text = describe_changes(
        [
            ("status", PolicyStatus.IN_REVIEW, PolicyStatus.SENT_TO_CARRIER),
            ("marketplace_id", None, "MKT-9"),
            ("effective_date", date(2026, 3, 1), date(2026, 4, 1)),
        ]
    )
    assert text.splitlines() == [
        "Status: in_review -> sent_to_carrier",
        "Marketplace ID: (empty) -> MKT-9",
        "Effective date: 2026-03-01 -> 2026-04-01",
    ]
