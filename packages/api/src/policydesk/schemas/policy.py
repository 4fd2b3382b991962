# This project was developed with assistance from AI tools.
"""Policy request/response schemas."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from db.enums import PolicyStatus
from pydantic import BaseModel, ConfigDict, Field

from . import Pagination


class PolicyCreate(BaseModel):
    """Create a policy for an existing customer."""

    customer_id: uuid.UUID
    insurance_company: str | None = Field(default=None, max_length=100)
    marketplace_id: str | None = Field(default=None, max_length=100)
    policy_number: str | None = Field(default=None, max_length=100)
    plan_name: str | None = Field(default=None, max_length=255)
    monthly_premium: Decimal | None = Field(default=None, ge=0)
    tax_credit: Decimal | None = Field(default=None, ge=0)
    effective_date: date | None = None
    plan_link: str | None = None
    aor_link: str | None = None
    notes: str | None = None
    assigned_processor_id: uuid.UUID | None = None


class PolicyUpdate(BaseModel):
    """Partial update submitted from the policy edit form."""

    status: PolicyStatus | None = None
    insurance_company: str | None = Field(default=None, max_length=100)
    marketplace_id: str | None = Field(default=None, max_length=100)
    policy_number: str | None = Field(default=None, max_length=100)
    plan_name: str | None = Field(default=None, max_length=255)
    monthly_premium: Decimal | None = Field(default=None, ge=0)
    tax_credit: Decimal | None = Field(default=None, ge=0)
    effective_date: date | None = None
    plan_link: str | None = None
    aor_link: str | None = None
    notes: str | None = None


class PolicyStatusUpdate(BaseModel):
    """Status-only change (Kanban drop)."""

    status: PolicyStatus


class PolicyResponse(BaseModel):
    """Single policy, possibly redacted for the caller's role.

    ``marketplace_id``, ``commission_status``, ``customer_email`` and
    ``customer_phone`` carry a restriction marker instead of their value
    when the caller may not see them.
    """

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    customer_id: uuid.UUID
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    status: PolicyStatus
    commission_status: str
    insurance_company: str | None = None
    marketplace_id: str | None = None
    policy_number: str | None = None
    plan_name: str | None = None
    monthly_premium: Decimal | None = None
    tax_credit: Decimal | None = None
    effective_date: date | None = None
    plan_link: str | None = None
    aor_link: str | None = None
    notes: str | None = None
    agent_name: str | None = None
    processor_name: str | None = None
    assigned_processor_id: uuid.UUID | None = None
    can_edit: bool = False
    created_at: datetime
    updated_at: datetime


class PolicyListResponse(BaseModel):
    """Paginated list of policies."""

    data: list[PolicyResponse]
    pagination: Pagination


class PolicyAccessResponse(BaseModel):
    """What the caller may do with a policy."""

    policy_id: uuid.UUID
    can_view: bool
    can_edit: bool
    redacted_fields: list[str] = []
