# This project was developed with assistance from AI tools.
"""Dashboard aggregates, scoped like every other read.

All functions are pure async queries -- no side effects.
"""

import logging
from decimal import Decimal

from db import CommissionRecord, Customer, Policy, User
from db.enums import PolicyStatus, UserRole
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.auth import UserContext
from ..schemas.dashboard import AgentPerformance, DashboardStats, RecentPolicy, StatusCount
from ..services.scope import apply_customer_scope, apply_data_scope, team_member_ids

logger = logging.getLogger(__name__)

RECENT_POLICY_LIMIT = 5


def _commission_filter(stmt, user: UserContext):
    """Agents see their own payouts, managers their team's, others all."""
    if user.role == UserRole.AGENT:
        return stmt.where(CommissionRecord.agent_id == user.user_id)
    if user.role == UserRole.MANAGER:
        return stmt.where(CommissionRecord.agent_id.in_(team_member_ids(user.user_id)))
    if user.role == UserRole.PROCESSOR:
        return apply_data_scope(stmt, user.data_scope, user, join_to_policy=CommissionRecord.policy)
    return stmt


async def get_team_performance(
    session: AsyncSession,
    user: UserContext,
) -> list[AgentPerformance]:
    """Per-agent book size; a manager sees their reports, super admin sees every agent."""
    customer_count = func.count(func.distinct(Customer.id))
    policy_count = func.count(func.distinct(Policy.id))
    active_count = func.count(
        func.distinct(case((Policy.status == PolicyStatus.ACTIVE, Policy.id)))
    )
    stmt = (
        select(User, customer_count, policy_count, active_count)
        .outerjoin(Customer, Customer.created_by_agent_id == User.id)
        .outerjoin(Policy, Policy.customer_id == Customer.id)
        .where(User.role == UserRole.AGENT)
        .group_by(User.id)
        .order_by(policy_count.desc())
    )
    if user.role == UserRole.MANAGER:
        stmt = stmt.where(User.manager_id == user.user_id)

    rows = (await session.execute(stmt)).all()
    return [
        AgentPerformance(
            agent_id=agent.id,
            agent_name=agent.full_name,
            customer_count=customers or 0,
            policy_count=policies or 0,
            active_policy_count=active or 0,
        )
        for agent, customers, policies, active in rows
    ]


async def get_dashboard_stats(session: AsyncSession, user: UserContext) -> DashboardStats:
    scope = user.data_scope

    total_customers = (
        await session.execute(apply_customer_scope(select(func.count(Customer.id)), scope, user))
    ).scalar() or 0

    status_stmt = apply_data_scope(
        select(Policy.status, func.count(Policy.id)), scope, user
    ).group_by(Policy.status)
    by_status = [
        StatusCount(status=status, count=count)
        for status, count in (await session.execute(status_stmt)).all()
    ]

    commissions = (
        await session.execute(
            _commission_filter(
                select(func.coalesce(func.sum(CommissionRecord.commission_amount), 0)), user
            )
        )
    ).scalar()

    recent_stmt = apply_data_scope(
        select(Policy, Customer.full_name)
        .join(Policy.customer)
        .order_by(Policy.created_at.desc())
        .limit(RECENT_POLICY_LIMIT),
        scope,
        user,
    )
    recent = [
        RecentPolicy(
            id=policy.id,
            customer_name=customer_name,
            status=policy.status,
            insurance_company=policy.insurance_company,
            created_at=policy.created_at,
        )
        for policy, customer_name in (await session.execute(recent_stmt)).all()
    ]

    team = None
    if user.role in (UserRole.MANAGER, UserRole.SUPER_ADMIN):
        team = await get_team_performance(session, user)

    return DashboardStats(
        total_customers=total_customers,
        total_policies=sum(sc.count for sc in by_status),
        policies_by_status=by_status,
        total_commissions=Decimal(commissions or 0),
        recent_policies=recent,
        team_performance=team,
    )
