# This project was developed with assistance from AI tools.
"""Commission routes: eligibility, batches, approval, stats."""

import uuid
from decimal import Decimal

from db import CommissionBatch, get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas import Pagination
from ..schemas.commission import (
    CommissionBatchCreate,
    CommissionBatchListResponse,
    CommissionBatchResponse,
    CommissionStats,
    EligiblePolicy,
    EligiblePolicyListResponse,
)
from ..services import commission as commission_service
from ..services.commission import CommissionConflictError, calculate_commission

router = APIRouter()

_ANALYST_ROLES = (UserRole.COMMISSION_ANALYST, UserRole.SUPER_ADMIN)
_BATCH_VIEW_ROLES = (UserRole.COMMISSION_ANALYST, UserRole.SUPER_ADMIN, UserRole.MANAGER)


def _build_batch_response(
    batch: CommissionBatch, record_count: int, total_amount: Decimal
) -> CommissionBatchResponse:
    return CommissionBatchResponse(
        id=batch.id,
        period_description=batch.period_description,
        status=batch.status,
        created_by_analyst_id=batch.created_by_analyst_id,
        created_by_name=batch.created_by.full_name if batch.created_by else None,
        approved_by_id=batch.approved_by_id,
        approved_by_name=batch.approved_by.full_name if batch.approved_by else None,
        approved_at=batch.approved_at,
        created_at=batch.created_at,
        record_count=record_count or 0,
        total_amount=Decimal(total_amount or 0),
    )


@router.get(
    "/eligible",
    response_model=EligiblePolicyListResponse,
    dependencies=[Depends(require_roles(*_ANALYST_ROLES))],
)
async def list_eligible(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
    search: str | None = Query(default=None, max_length=100),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> EligiblePolicyListResponse:
    """Active policies that have not been commissioned yet."""
    rows, total = await commission_service.list_eligible_policies(
        session, search=search, offset=offset, limit=limit
    )
    items = [
        EligiblePolicy(
            policy_id=policy.id,
            customer_name=customer.full_name,
            agent_id=agent.id,
            agent_name=agent.full_name,
            insurance_company=policy.insurance_company,
            monthly_premium=policy.monthly_premium,
            effective_date=policy.effective_date,
            estimated_commission=calculate_commission(policy.monthly_premium),
        )
        for policy, customer, agent in rows
    ]
    return EligiblePolicyListResponse(
        data=items,
        pagination=Pagination(
            total=total, offset=offset, limit=limit, has_more=(offset + limit < total)
        ),
    )


@router.get(
    "/stats",
    response_model=CommissionStats,
    dependencies=[Depends(require_roles(*_BATCH_VIEW_ROLES))],
)
async def commission_stats(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> CommissionStats:
    return CommissionStats(**await commission_service.get_commission_stats(session))


@router.get(
    "/batches",
    response_model=CommissionBatchListResponse,
    dependencies=[Depends(require_roles(*_BATCH_VIEW_ROLES))],
)
async def list_batches(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> CommissionBatchListResponse:
    rows, total = await commission_service.list_commission_batches(
        session, offset=offset, limit=limit
    )
    return CommissionBatchListResponse(
        data=[_build_batch_response(*row) for row in rows],
        pagination=Pagination(
            total=total, offset=offset, limit=limit, has_more=(offset + limit < total)
        ),
    )


@router.post(
    "/batches",
    response_model=CommissionBatchResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*_ANALYST_ROLES))],
)
async def create_batch(
    body: CommissionBatchCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> CommissionBatchResponse:
    """Calculate commissions for the selected policies into a new batch."""
    try:
        row = await commission_service.create_commission_batch(
            session, user, body.period_description, body.policy_ids
        )
    except CommissionConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No matching policies found"
        )
    return _build_batch_response(*row)


@router.post(
    "/batches/{batch_id}/approve",
    response_model=CommissionBatchResponse,
    dependencies=[Depends(require_roles(UserRole.MANAGER, UserRole.SUPER_ADMIN))],
)
async def approve_batch(
    batch_id: uuid.UUID,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> CommissionBatchResponse:
    row = await commission_service.approve_commission_batch(session, user, batch_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Batch not found")
    return _build_batch_response(*row)
