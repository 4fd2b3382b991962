# This project was developed with assistance from AI tools.
"""Policy service with role-based data scope filtering.

Every query is filtered through the caller's DataScope so that agents see
only their own customers' policies, managers see their team's, processors
see what is assigned to them, and the remaining staff roles see all.
Writes go through ``decide_policy_access`` and commit the policy change
together with its audit task.
"""

import logging
import uuid
from datetime import UTC, date, datetime, time
from typing import Any

from db import Customer, Policy
from db.enums import CommissionStatus, PolicyStatus, UserRole
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.access import decide_policy_access
from ..core.config import settings
from ..schemas.auth import UserContext
from ..services.audit import record_policy_change, snapshot
from ..services.scope import apply_customer_scope, apply_data_scope
from ..services.workflow import check_transition

logger = logging.getLogger(__name__)

ENABLE_EDITING_TITLE = "Editing enabled by supervisor"


class PolicyEditForbiddenError(Exception):
    """Raised when the caller may see a policy but not change it."""

    pass


_UPDATABLE_FIELDS = {
    "status",
    "insurance_company",
    "marketplace_id",
    "policy_number",
    "plan_name",
    "monthly_premium",
    "tax_credit",
    "effective_date",
    "plan_link",
    "aor_link",
    "notes",
}

_CREATE_FIELDS = (_UPDATABLE_FIELDS - {"status"}) | {"assigned_processor_id"}


def _policy_options():
    return (
        selectinload(Policy.customer).selectinload(Customer.created_by_agent),
        selectinload(Policy.assigned_processor),
    )


def _apply_filters(stmt, search, status, insurance_company, start_date, end_date):
    """Apply optional WHERE clauses for the policy list filters."""
    if search:
        stmt = stmt.where(Customer.full_name.ilike(f"%{search}%"))
    if status is not None:
        stmt = stmt.where(Policy.status == status)
    if insurance_company:
        stmt = stmt.where(Policy.insurance_company.ilike(f"%{insurance_company}%"))
    if start_date is not None:
        stmt = stmt.where(Policy.created_at >= datetime.combine(start_date, time.min, UTC))
    if end_date is not None:
        stmt = stmt.where(Policy.created_at <= datetime.combine(end_date, time.max, UTC))
    return stmt


async def list_policies(
    session: AsyncSession,
    user: UserContext,
    *,
    offset: int = 0,
    limit: int = 20,
    search: str | None = None,
    status: PolicyStatus | None = None,
    insurance_company: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> tuple[list[Policy], int]:
    """Return policies visible to the current user, newest first."""
    filters = (search, status, insurance_company, start_date, end_date)

    count_stmt = select(func.count(Policy.id)).join(Policy.customer)
    count_stmt = apply_data_scope(count_stmt, user.data_scope, user)
    count_stmt = _apply_filters(count_stmt, *filters)
    total = (await session.execute(count_stmt)).scalar() or 0

    stmt = (
        select(Policy)
        .join(Policy.customer)
        .options(*_policy_options())
        .order_by(Policy.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    stmt = apply_data_scope(stmt, user.data_scope, user)
    stmt = _apply_filters(stmt, *filters)
    result = await session.execute(stmt)
    return result.unique().scalars().all(), total


async def get_policy(
    session: AsyncSession,
    user: UserContext,
    policy_id: uuid.UUID,
) -> Policy | None:
    """Return a single policy if visible to the current user.

    Returns None (which the route maps to 404) for out-of-scope policies
    rather than 403, to avoid leaking existence of resources.
    """
    stmt = select(Policy).options(*_policy_options()).where(Policy.id == policy_id)
    stmt = apply_data_scope(stmt, user.data_scope, user)
    result = await session.execute(stmt)
    return result.unique().scalar_one_or_none()


async def create_policy(
    session: AsyncSession,
    user: UserContext,
    customer_id: uuid.UUID,
    **fields: Any,
) -> Policy | None:
    """Open a new_lead policy for a customer the caller can see.

    Returns None when the customer does not exist or is out of scope.
    """
    customer_stmt = apply_customer_scope(
        select(Customer.id).where(Customer.id == customer_id), user.data_scope, user
    )
    if (await session.execute(customer_stmt)).scalar_one_or_none() is None:
        return None

    policy = Policy(
        customer_id=customer_id,
        status=PolicyStatus.NEW_LEAD,
        commission_status=CommissionStatus.PENDING,
        updated_by_id=user.user_id,
        **{k: v for k, v in fields.items() if k in _CREATE_FIELDS},
    )
    session.add(policy)
    await session.flush()
    policy_id = policy.id  # capture before commit expires the object
    await session.commit()
    logger.info("Policy %s created for customer %s by %s", policy_id, customer_id, user.user_id)
    return await get_policy(session, user, policy_id)


async def update_policy(
    session: AsyncSession,
    user: UserContext,
    policy_id: uuid.UUID,
    changes: dict[str, Any],
) -> Policy | None:
    """Apply an edit-form submit.

    Returns None if the policy is not found or not accessible.

    Raises:
        PolicyEditForbiddenError: the caller may not edit this policy.
        InvalidTransitionError: the requested status move is rejected.
    """
    policy = await get_policy(session, user, policy_id)
    if policy is None:
        return None

    decision = decide_policy_access(user, policy)
    if not decision.can_edit:
        logger.warning(
            "Policy edit denied: user=%s role=%s policy=%s status=%s",
            user.user_id,
            user.role.value,
            policy_id,
            PolicyStatus(policy.status).value,
        )
        raise PolicyEditForbiddenError("Insufficient permissions to edit this policy")

    before = snapshot(policy)
    if changes.get("status") is not None:
        changes = {
            **changes,
            "status": check_transition(
                policy.status, changes["status"], strict=settings.STRICT_STATUS_TRANSITIONS
            ),
        }

    for field, value in changes.items():
        if field not in _UPDATABLE_FIELDS:
            continue
        if field == "status" and value is None:
            continue
        setattr(policy, field, value)

    policy.updated_by_id = user.user_id
    policy.updated_at = datetime.now(UTC)
    record_policy_change(session, user, policy, before)
    await session.commit()
    return await get_policy(session, user, policy_id)


async def update_policy_status(
    session: AsyncSession,
    user: UserContext,
    policy_id: uuid.UUID,
    status: PolicyStatus,
) -> Policy | None:
    """Status-only update, same gate as the edit form."""
    return await update_policy(session, user, policy_id, {"status": status})


async def enable_editing_for_policy(
    session: AsyncSession,
    user: UserContext,
    policy_id: uuid.UUID,
) -> Policy | None:
    """Supervisor override: put a policy back into ``in_review``.

    Bypasses the transition table so processed, rejected and cancelled
    policies can be reopened. Always leaves an audit task behind.
    """
    if user.role not in (UserRole.SUPER_ADMIN, UserRole.MANAGER):
        raise PolicyEditForbiddenError("Only supervisors can re-enable editing")

    policy = await get_policy(session, user, policy_id)
    if policy is None:
        return None

    before = snapshot(policy)
    policy.status = PolicyStatus.IN_REVIEW
    policy.updated_by_id = user.user_id
    policy.updated_at = datetime.now(UTC)
    record_policy_change(session, user, policy, before, title=ENABLE_EDITING_TITLE, always=True)
    await session.commit()
    logger.info(
        "Editing re-enabled on policy %s by %s (was %s)",
        policy_id,
        user.user_id,
        before["status"].value if isinstance(before["status"], PolicyStatus) else before["status"],
    )
    return await get_policy(session, user, policy_id)
