# This project was developed with assistance from AI tools.
"""Processing queue: what processors work on and how they move it.

A processor's queue holds the policies assigned to them plus unassigned
policies written by the teams of the managers they are attached to
(``processor_manager_assignments``). Managers see their own team's
policies and super admins see everything.
"""

import logging
import uuid
from datetime import UTC, datetime

from db import Customer, CustomerTask, Policy, ProcessorManagerAssignment, User
from db.enums import PolicyStatus, TaskPriority, TaskType, UserRole
from sqlalchemy import and_, false, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.config import settings
from ..schemas.auth import UserContext
from ..services.audit import record_policy_change, snapshot
from ..services.scope import owner_clause
from ..services.workflow import check_transition

logger = logging.getLogger(__name__)

ATTENTION_STATUSES = (PolicyStatus.IN_REVIEW, PolicyStatus.MISSING_DOCS)
MISSING_DOCS_TITLE = "Missing documents requested"


class ProcessorNotFoundError(ValueError):
    """Raised when a policy is assigned to someone who is not an active processor."""

    pass


def queue_clause(user: UserContext):
    """WHERE clause selecting the caller's processing queue, or None for all."""
    if user.role == UserRole.SUPER_ADMIN:
        return None
    if user.role == UserRole.MANAGER:
        team = select(Customer.id).where(owner_clause(user.data_scope))
        return Policy.customer_id.in_(team)
    if user.role == UserRole.PROCESSOR:
        managers = select(ProcessorManagerAssignment.manager_id).where(
            ProcessorManagerAssignment.processor_id == user.user_id
        )
        agents = select(User.id).where(
            or_(User.manager_id.in_(managers), User.id.in_(managers))
        )
        team_customers = select(Customer.id).where(Customer.created_by_agent_id.in_(agents))
        return or_(
            Policy.assigned_processor_id == user.user_id,
            and_(
                Policy.assigned_processor_id.is_(None),
                Policy.customer_id.in_(team_customers),
            ),
        )
    return false()


def _scoped(stmt, user: UserContext):
    clause = queue_clause(user)
    return stmt if clause is None else stmt.where(clause)


async def get_processing_queue(
    session: AsyncSession,
    user: UserContext,
    *,
    status: PolicyStatus | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Policy], int]:
    count_stmt = _scoped(select(func.count(Policy.id)), user)
    stmt = _scoped(
        select(Policy)
        .options(
            selectinload(Policy.customer).selectinload(Customer.created_by_agent),
            selectinload(Policy.assigned_processor),
        )
        .order_by(Policy.updated_at.desc()),
        user,
    )
    if status is not None:
        count_stmt = count_stmt.where(Policy.status == status)
        stmt = stmt.where(Policy.status == status)

    total = (await session.execute(count_stmt)).scalar() or 0
    result = await session.execute(stmt.offset(offset).limit(limit))
    return result.unique().scalars().all(), total


async def get_queue_policy(
    session: AsyncSession,
    user: UserContext,
    policy_id: uuid.UUID,
) -> Policy | None:
    """A single policy from the caller's queue, or None."""
    stmt = _scoped(
        select(Policy)
        .options(
            selectinload(Policy.customer).selectinload(Customer.created_by_agent),
            selectinload(Policy.assigned_processor),
        )
        .where(Policy.id == policy_id),
        user,
    )
    result = await session.execute(stmt)
    return result.unique().scalar_one_or_none()


async def list_available_processors(session: AsyncSession) -> list[User]:
    stmt = (
        select(User)
        .where(User.role == UserRole.PROCESSOR, User.is_active.is_(True))
        .order_by(User.first_name, User.last_name)
    )
    return list((await session.execute(stmt)).scalars().all())


async def assign_policy(
    session: AsyncSession,
    user: UserContext,
    policy_id: uuid.UUID,
    processor_id: uuid.UUID,
) -> Policy | None:
    """Hand a queued policy to a processor.

    Raises:
        ProcessorNotFoundError: ``processor_id`` is not an active processor.
    """
    policy = await get_queue_policy(session, user, policy_id)
    if policy is None:
        return None

    processor = await session.get(User, processor_id)
    if processor is None or processor.role != UserRole.PROCESSOR or not processor.is_active:
        raise ProcessorNotFoundError(f"User {processor_id} is not an active processor")

    policy.assigned_processor_id = processor_id
    policy.updated_by_id = user.user_id
    policy.updated_at = datetime.now(UTC)
    await session.commit()
    logger.info("Policy %s assigned to processor %s by %s", policy_id, processor_id, user.user_id)
    return await get_queue_policy(session, user, policy_id)


async def update_processing_status(
    session: AsyncSession,
    user: UserContext,
    policy_id: uuid.UUID,
    status: PolicyStatus,
    *,
    notes: str | None = None,
) -> Policy | None:
    """Move a queued policy to ``status`` and record the change.

    Raises:
        InvalidTransitionError: the move is rejected in strict mode.
    """
    policy = await get_queue_policy(session, user, policy_id)
    if policy is None:
        return None

    before = snapshot(policy)
    policy.status = check_transition(
        policy.status, status, strict=settings.STRICT_STATUS_TRANSITIONS
    )
    policy.updated_by_id = user.user_id
    policy.updated_at = datetime.now(UTC)
    record_policy_change(session, user, policy, before)

    if notes:
        session.add(
            CustomerTask(
                customer_id=policy.customer_id,
                policy_id=policy.id,
                title=MISSING_DOCS_TITLE
                if status == PolicyStatus.MISSING_DOCS
                else "Processing note",
                description=notes,
                type=TaskType.DOCUMENT_REQUEST
                if status == PolicyStatus.MISSING_DOCS
                else TaskType.FOLLOW_UP,
                priority=TaskPriority.HIGH,
                created_by_id=user.user_id,
                assigned_to_id=policy.customer.created_by_agent_id if policy.customer else None,
            )
        )

    await session.commit()
    return await get_queue_policy(session, user, policy_id)


async def request_missing_docs(
    session: AsyncSession,
    user: UserContext,
    policy_id: uuid.UUID,
    notes: str,
) -> Policy | None:
    """Flag a policy as ``missing_docs`` and open a document request for the agent."""
    return await update_processing_status(
        session, user, policy_id, PolicyStatus.MISSING_DOCS, notes=notes
    )


async def get_processing_stats(session: AsyncSession, user: UserContext) -> dict:
    by_status = (
        await session.execute(
            _scoped(select(Policy.status, func.count(Policy.id)), user).group_by(Policy.status)
        )
    ).all()
    counts = {(s.value if hasattr(s, "value") else s): n for s, n in by_status}
    attention = sum(counts.get(s.value, 0) for s in ATTENTION_STATUSES)
    return {
        "total": sum(counts.values()),
        "needing_attention": attention,
        "by_status": counts,
    }
