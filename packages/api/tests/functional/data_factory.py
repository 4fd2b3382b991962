# This project was developed with assistance from AI tools.
"""Centralized mock data portfolio for functional tests.

Produces consistent mock ORM objects shared across persona tests:
- agents Alex (team of manager Marta) and Bob (no team), processor Paula
- customers Lucia (Alex) and Jorge (Bob)
- policies at intake, processed and active statuses

All IDs are fixed so persona tests can reference them.
"""

import uuid
from datetime import UTC, date, datetime
from decimal import Decimal
from unittest.mock import MagicMock

from db.enums import (
    BoardColumn,
    CommissionStatus,
    PolicyStatus,
    TaskPriority,
    TaskStatus,
    TaskType,
    UserRole,
)

from .personas import AGENT_BOB_USER_ID, AGENT_USER_ID, MANAGER_USER_ID, PROCESSOR_USER_ID

CUSTOMER_LUCIA_ID = uuid.UUID("10000000-0000-4000-8000-000000000001")
CUSTOMER_JORGE_ID = uuid.UUID("10000000-0000-4000-8000-000000000002")
POLICY_LUCIA_NEW_ID = uuid.UUID("20000000-0000-4000-8000-000000000001")
POLICY_LUCIA_ACTIVE_ID = uuid.UUID("20000000-0000-4000-8000-000000000002")
POLICY_JORGE_ID = uuid.UUID("20000000-0000-4000-8000-000000000003")

_CREATED = datetime(2026, 2, 1, 12, 0, tzinfo=UTC)

# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def make_user(
    user_id: uuid.UUID,
    first_name: str,
    last_name: str,
    role: UserRole,
    manager_id: uuid.UUID | None = None,
) -> MagicMock:
    u = MagicMock()
    u.id = user_id
    u.first_name = first_name
    u.last_name = last_name
    u.full_name = f"{first_name} {last_name}"
    u.email = f"{first_name.lower()}@policydesk.test"
    u.role = role
    u.manager_id = manager_id
    u.is_active = True
    u.created_at = _CREATED
    return u


def agent_alex() -> MagicMock:
    return make_user(AGENT_USER_ID, "Alex", "Moreno", UserRole.AGENT, manager_id=MANAGER_USER_ID)


def agent_bob() -> MagicMock:
    return make_user(AGENT_BOB_USER_ID, "Bob", "Diaz", UserRole.AGENT)


def processor_paula() -> MagicMock:
    return make_user(PROCESSOR_USER_ID, "Paula", "Soto", UserRole.PROCESSOR)


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------


def make_customer(customer_id: uuid.UUID, full_name: str, agent: MagicMock) -> MagicMock:
    c = MagicMock()
    c.id = customer_id
    c.full_name = full_name
    c.email = f"{full_name.split()[0].lower()}@example.com"
    c.phone = "305-555-0100"
    c.created_by_agent_id = agent.id
    c.created_by_agent = agent
    c.ssn_encrypted = None
    c.created_at = _CREATED
    c.updated_at = _CREATED
    return c


def customer_lucia() -> MagicMock:
    return make_customer(CUSTOMER_LUCIA_ID, "Lucia Fernandez", agent_alex())


def customer_jorge() -> MagicMock:
    return make_customer(CUSTOMER_JORGE_ID, "Jorge Castillo", agent_bob())


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------


def make_policy(
    policy_id: uuid.UUID,
    customer: MagicMock,
    status: PolicyStatus = PolicyStatus.NEW_LEAD,
    *,
    processor: MagicMock | None = None,
    monthly_premium: Decimal | None = Decimal("250.00"),
    insurance_company: str | None = "Aetna",
) -> MagicMock:
    """Build a mock Policy with every attribute the response schema reads."""
    p = MagicMock()
    p.id = policy_id
    p.customer_id = customer.id
    p.customer = customer
    p.status = status
    p.commission_status = CommissionStatus.PENDING
    p.insurance_company = insurance_company
    p.marketplace_id = "MKT-448812"
    p.policy_number = "POL-1001"
    p.plan_name = "Silver 70 HMO"
    p.monthly_premium = monthly_premium
    p.tax_credit = Decimal("180.00")
    p.effective_date = date(2026, 3, 1)
    p.plan_link = "https://plans.example.com/silver-70"
    p.aor_link = "https://aor.example.com/sign/1001"
    p.notes = "Customer prefers Spanish."
    p.assigned_processor_id = processor.id if processor is not None else None
    p.assigned_processor = processor
    p.updated_by_id = None
    p.created_at = _CREATED
    p.updated_at = _CREATED
    return p


def policy_lucia_new() -> MagicMock:
    return make_policy(POLICY_LUCIA_NEW_ID, customer_lucia(), PolicyStatus.NEW_LEAD)


def policy_lucia_active() -> MagicMock:
    return make_policy(
        POLICY_LUCIA_ACTIVE_ID,
        customer_lucia(),
        PolicyStatus.ACTIVE,
        processor=processor_paula(),
    )


def policy_jorge_in_review() -> MagicMock:
    return make_policy(POLICY_JORGE_ID, customer_jorge(), PolicyStatus.IN_REVIEW)


def alex_policies() -> list[MagicMock]:
    return [policy_lucia_new(), policy_lucia_active()]


def all_policies() -> list[MagicMock]:
    return [policy_lucia_new(), policy_lucia_active(), policy_jorge_in_review()]


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


def make_post_sale_task(
    column: BoardColumn = BoardColumn.PENDING,
    position: int = 0,
    title: str = "Send welcome kit",
) -> MagicMock:
    t = MagicMock()
    t.id = uuid.uuid4()
    t.title = title
    t.description = None
    t.type = TaskType.GENERAL
    t.priority = TaskPriority.MEDIUM
    t.status = TaskStatus.PENDING
    t.board_column = column.value
    t.position = position
    t.customer_id = CUSTOMER_LUCIA_ID
    t.policy_id = None
    t.assigned_to_id = None
    t.created_by_id = MANAGER_USER_ID
    t.due_date = None
    t.completed_at = None
    t.notes = None
    t.created_at = _CREATED
    t.updated_at = _CREATED
    return t
