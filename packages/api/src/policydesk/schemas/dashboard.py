# This project was developed with assistance from AI tools.
"""Dashboard schemas."""

import uuid
from datetime import datetime
from decimal import Decimal

from db.enums import PolicyStatus
from pydantic import BaseModel


class StatusCount(BaseModel):
    status: PolicyStatus
    count: int


class RecentPolicy(BaseModel):
    id: uuid.UUID
    customer_name: str
    status: PolicyStatus
    insurance_company: str | None = None
    created_at: datetime


class AgentPerformance(BaseModel):
    agent_id: uuid.UUID
    agent_name: str
    customer_count: int
    policy_count: int
    active_policy_count: int


class DashboardStats(BaseModel):
    """Headline numbers for the caller's slice of the book."""

    total_customers: int
    total_policies: int
    policies_by_status: list[StatusCount]
    total_commissions: Decimal
    recent_policies: list[RecentPolicy]
    team_performance: list[AgentPerformance] | None = None
