# This project was developed with assistance from AI tools.
"""Commission eligibility, batch creation and approval.

A policy is commissionable once it is ``active`` and has no commission
record. Creating a batch inserts the batch row, one record per selected
policy and the policies' ``commission_status`` change in a single
transaction. ``commission_records.policy_id`` is unique, so a batch that
overlaps an already-commissioned policy fails as a whole.
"""

import logging
import uuid
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

from db import CommissionBatch, CommissionRecord, Customer, Policy, User
from db.enums import BatchStatus, CommissionStatus, PolicyStatus
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..schemas.auth import UserContext

logger = logging.getLogger(__name__)

COMMISSION_RATE = Decimal("0.10")
_CENT = Decimal("0.01")


class CommissionConflictError(Exception):
    """Raised when a batch includes a policy that already has a commission record."""

    pass


def calculate_commission(monthly_premium: Decimal | str | None) -> Decimal:
    """Agent commission for one policy: 10% of the monthly premium, in cents."""
    premium = Decimal(monthly_premium) if monthly_premium is not None else Decimal("0")
    return (premium * COMMISSION_RATE).quantize(_CENT, rounding=ROUND_HALF_UP)


def _eligible_filter(stmt):
    return stmt.outerjoin(CommissionRecord, CommissionRecord.policy_id == Policy.id).where(
        Policy.status == PolicyStatus.ACTIVE,
        CommissionRecord.id.is_(None),
    )


async def list_eligible_policies(
    session: AsyncSession,
    *,
    search: str | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[tuple[Policy, Customer, User]], int]:
    """Return active, not-yet-commissioned policies with customer and agent."""
    count_stmt = _eligible_filter(select(func.count(Policy.id)).join(Policy.customer))
    stmt = _eligible_filter(
        select(Policy, Customer, User)
        .join(Policy.customer)
        .join(User, User.id == Customer.created_by_agent_id)
    )
    if search:
        count_stmt = count_stmt.where(Customer.full_name.ilike(f"%{search}%"))
        stmt = stmt.where(Customer.full_name.ilike(f"%{search}%"))

    total = (await session.execute(count_stmt)).scalar() or 0
    stmt = stmt.order_by(Policy.updated_at.desc()).offset(offset).limit(limit)
    rows = (await session.execute(stmt)).all()
    return [tuple(row) for row in rows], total


def _batch_summary_stmt():
    return (
        select(
            CommissionBatch,
            func.count(CommissionRecord.id).label("record_count"),
            func.coalesce(func.sum(CommissionRecord.commission_amount), 0).label("total_amount"),
        )
        .outerjoin(CommissionRecord, CommissionRecord.payment_batch_id == CommissionBatch.id)
        .options(
            selectinload(CommissionBatch.created_by),
            selectinload(CommissionBatch.approved_by),
        )
        .group_by(CommissionBatch.id)
    )


async def list_commission_batches(
    session: AsyncSession,
    *,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[tuple[CommissionBatch, int, Decimal]], int]:
    """Return batches newest first with record count and payout total."""
    total = (await session.execute(select(func.count(CommissionBatch.id)))).scalar() or 0
    stmt = (
        _batch_summary_stmt()
        .order_by(CommissionBatch.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    rows = (await session.execute(stmt)).all()
    return [tuple(row) for row in rows], total


async def get_commission_batch(
    session: AsyncSession,
    batch_id: uuid.UUID,
) -> tuple[CommissionBatch, int, Decimal] | None:
    stmt = (
        _batch_summary_stmt()
        .where(CommissionBatch.id == batch_id)
        .execution_options(populate_existing=True)
    )
    row = (await session.execute(stmt)).first()
    return tuple(row) if row is not None else None


async def create_commission_batch(
    session: AsyncSession,
    user: UserContext,
    period_description: str,
    policy_ids: list[uuid.UUID],
) -> tuple[CommissionBatch, int, Decimal] | None:
    """Create a batch with one commission record per selected policy.

    Unknown policy ids are skipped. Returns None when none of the ids
    match a policy.

    Raises:
        CommissionConflictError: a selected policy already has a record.
    """
    batch = CommissionBatch(
        period_description=period_description,
        status=BatchStatus.PENDING_APPROVAL,
        created_by_analyst_id=user.user_id,
    )
    session.add(batch)
    await session.flush()
    batch_id = batch.id

    rows = (
        await session.execute(
            select(Policy.id, Policy.monthly_premium, Customer.created_by_agent_id)
            .join(Policy.customer)
            .where(Policy.id.in_(policy_ids))
        )
    ).all()

    found = [row.id for row in rows]
    skipped = set(policy_ids) - set(found)
    if skipped:
        logger.warning(
            "Commission batch %s: skipping unknown policies %s",
            batch_id,
            sorted(str(pid) for pid in skipped),
        )
    if not rows:
        await session.rollback()
        return None

    records = [
        CommissionRecord(
            policy_id=row.id,
            agent_id=row.created_by_agent_id,
            commission_amount=calculate_commission(row.monthly_premium),
            processed_by_analyst_id=user.user_id,
            payment_batch_id=batch_id,
        )
        for row in rows
    ]
    try:
        session.add_all(records)
        await session.flush()
        await session.execute(
            update(Policy)
            .where(Policy.id.in_(found))
            .values(commission_status=CommissionStatus.CALCULATED)
        )
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        logger.warning("Commission batch rejected: overlapping policies %s", found)
        raise CommissionConflictError(
            "One or more selected policies already have a commission record."
        ) from exc

    logger.info(
        "Commission batch %s created by %s: %d records", batch_id, user.user_id, len(records)
    )
    return await get_commission_batch(session, batch_id)


async def approve_commission_batch(
    session: AsyncSession,
    user: UserContext,
    batch_id: uuid.UUID,
) -> tuple[CommissionBatch, int, Decimal] | None:
    """Mark a batch approved. Records are not re-validated."""
    batch = await session.get(CommissionBatch, batch_id)
    if batch is None:
        return None

    batch.status = BatchStatus.APPROVED
    batch.approved_by_id = user.user_id
    batch.approved_at = datetime.now(UTC)
    await session.commit()
    logger.info("Commission batch %s approved by %s", batch_id, user.user_id)
    return await get_commission_batch(session, batch_id)


async def get_commission_stats(session: AsyncSession) -> dict:
    total_amount = (
        await session.execute(
            select(func.coalesce(func.sum(CommissionRecord.commission_amount), 0))
        )
    ).scalar()
    pending = (
        await session.execute(_eligible_filter(select(func.count(Policy.id))))
    ).scalar() or 0
    by_status = (
        await session.execute(
            select(CommissionBatch.status, func.count(CommissionBatch.id)).group_by(
                CommissionBatch.status
            )
        )
    ).all()
    return {
        "total_commission_amount": Decimal(total_amount or 0).quantize(_CENT),
        "pending_eligible_count": pending,
        "batches_by_status": {
            (s.value if hasattr(s, "value") else s): count for s, count in by_status
        },
    }
