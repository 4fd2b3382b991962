# This project was developed with assistance from AI tools.
"""Sales and team performance reports for managers and super admins.

Sales rows follow the caller's data scope. Team performance covers a
manager's direct reports, or every agent for a super admin.
"""

import logging
import uuid
from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal

from db import Customer, Policy, User
from db.enums import PolicyStatus, UserRole
from sqlalchemy import and_, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.auth import UserContext
from ..schemas.report import AgentPerformanceReport, SalesReport, SalesReportRow
from ..services.scope import apply_data_scope

logger = logging.getLogger(__name__)

SALES_REPORT_ROW_LIMIT = 1000


def _sales_filters(stmt, agent_id, insurance_company, status, start_date, end_date):
    if agent_id is not None:
        stmt = stmt.where(Customer.created_by_agent_id == agent_id)
    if insurance_company:
        stmt = stmt.where(Policy.insurance_company == insurance_company)
    if status is not None:
        stmt = stmt.where(Policy.status == status)
    if start_date is not None:
        stmt = stmt.where(Policy.created_at >= datetime.combine(start_date, time.min, UTC))
    if end_date is not None:
        stmt = stmt.where(Policy.created_at <= datetime.combine(end_date, time.max, UTC))
    return stmt


async def get_sales_report(
    session: AsyncSession,
    user: UserContext,
    *,
    agent_id: uuid.UUID | None = None,
    insurance_company: str | None = None,
    status: PolicyStatus | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> SalesReport:
    """Newest policies matching the filters, capped at SALES_REPORT_ROW_LIMIT."""
    stmt = (
        select(Policy, Customer.full_name, User)
        .join(Policy.customer)
        .join(User, Customer.created_by_agent_id == User.id)
        .order_by(Policy.created_at.desc())
        .limit(SALES_REPORT_ROW_LIMIT)
    )
    stmt = apply_data_scope(stmt, user.data_scope, user)
    stmt = _sales_filters(stmt, agent_id, insurance_company, status, start_date, end_date)

    rows = [
        SalesReportRow(
            id=policy.id,
            customer_name=customer_name,
            agent_name=agent.full_name,
            insurance_company=policy.insurance_company,
            monthly_premium=policy.monthly_premium,
            status=policy.status,
            created_at=policy.created_at,
        )
        for policy, customer_name, agent in (await session.execute(stmt)).all()
    ]
    if len(rows) == SALES_REPORT_ROW_LIMIT:
        logger.warning("Sales report for %s truncated at %d rows", user.user_id, len(rows))

    return SalesReport(
        total_policies=len(rows),
        active_policies=sum(1 for r in rows if r.status == PolicyStatus.ACTIVE),
        total_premium=sum((r.monthly_premium or Decimal(0) for r in rows), Decimal(0)),
        policies=rows,
    )


def _conversion_rate(active: int, total: int) -> float:
    """Share of policies that reached active, as a percentage."""
    if not total:
        return 0.0
    return round(active / total * 100, 2)


async def get_team_performance_report(
    session: AsyncSession,
    user: UserContext,
    days: int,
) -> list[AgentPerformanceReport]:
    """Per-agent production for policies created in the last ``days`` days.

    Agents with no policies in the window still appear with zero totals.
    """
    since = datetime.now(UTC) - timedelta(days=days)
    policy_count = func.count(func.distinct(Policy.id))
    active_count = func.count(
        func.distinct(case((Policy.status == PolicyStatus.ACTIVE, Policy.id)))
    )
    premium = func.coalesce(func.sum(Policy.monthly_premium), 0)
    stmt = (
        select(User, policy_count, active_count, premium)
        .outerjoin(Customer, Customer.created_by_agent_id == User.id)
        .outerjoin(
            Policy,
            and_(Policy.customer_id == Customer.id, Policy.created_at >= since),
        )
        .where(User.role == UserRole.AGENT)
        .group_by(User.id)
        .order_by(policy_count.desc())
    )
    if user.role == UserRole.MANAGER:
        stmt = stmt.where(User.manager_id == user.user_id)

    rows = (await session.execute(stmt)).all()
    return [
        AgentPerformanceReport(
            agent_id=agent.id,
            agent_name=agent.full_name,
            total_policies=total or 0,
            active_policies=active or 0,
            total_premium=Decimal(premium_sum or 0),
            conversion_rate=_conversion_rate(active or 0, total or 0),
        )
        for agent, total, active, premium_sum in rows
    ]
