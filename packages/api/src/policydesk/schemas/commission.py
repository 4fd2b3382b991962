# This project was developed with assistance from AI tools.
"""Commission request/response schemas."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from db.enums import BatchStatus
from pydantic import BaseModel, Field

from . import Pagination


class EligiblePolicy(BaseModel):
    """Active policy that has not been commissioned yet."""

    policy_id: uuid.UUID
    customer_name: str
    agent_id: uuid.UUID
    agent_name: str | None = None
    insurance_company: str | None = None
    monthly_premium: Decimal | None = None
    effective_date: date | None = None
    estimated_commission: Decimal


class EligiblePolicyListResponse(BaseModel):
    data: list[EligiblePolicy]
    pagination: Pagination


class CommissionBatchCreate(BaseModel):
    """Select policies into a new payout batch."""

    period_description: str = Field(min_length=1, max_length=100)
    policy_ids: list[uuid.UUID] = Field(min_length=1)


class CommissionBatchResponse(BaseModel):
    id: uuid.UUID
    period_description: str
    status: BatchStatus
    created_by_analyst_id: uuid.UUID
    created_by_name: str | None = None
    approved_by_id: uuid.UUID | None = None
    approved_by_name: str | None = None
    approved_at: datetime | None = None
    created_at: datetime
    record_count: int = 0
    total_amount: Decimal = Decimal("0.00")


class CommissionBatchListResponse(BaseModel):
    data: list[CommissionBatchResponse]
    pagination: Pagination


class CommissionStats(BaseModel):
    total_commission_amount: Decimal
    pending_eligible_count: int
    batches_by_status: dict[str, int]
