# This project was developed with assistance from AI tools.
"""Sales and team performance report schemas."""

import uuid
from datetime import datetime
from decimal import Decimal

from db.enums import PolicyStatus
from pydantic import BaseModel


class SalesReportRow(BaseModel):
    id: uuid.UUID
    customer_name: str
    agent_name: str
    insurance_company: str | None = None
    monthly_premium: Decimal | None = None
    status: PolicyStatus
    created_at: datetime


class SalesReport(BaseModel):
    """Filtered sales with totals computed over the returned rows."""

    total_policies: int
    active_policies: int
    total_premium: Decimal
    policies: list[SalesReportRow]


class AgentPerformanceReport(BaseModel):
    agent_id: uuid.UUID
    agent_name: str
    total_policies: int
    active_policies: int
    total_premium: Decimal
    conversion_rate: float
