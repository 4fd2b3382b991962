# This project was developed with assistance from AI tools.
"""Policy routes with RBAC enforcement and role-based redaction."""

import uuid
from datetime import date

from db import Policy, get_db
from db.enums import PolicyStatus, UserRole
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.access import apply_redactions, decide_policy_access
from ..middleware.auth import CurrentUser, require_roles
from ..schemas import Pagination
from ..schemas.auth import UserContext
from ..schemas.policy import (
    PolicyAccessResponse,
    PolicyCreate,
    PolicyListResponse,
    PolicyResponse,
    PolicyStatusUpdate,
    PolicyUpdate,
)
from ..services import policy as policy_service
from ..services.policy import PolicyEditForbiddenError
from ..services.workflow import InvalidTransitionError

router = APIRouter()

_ALL_ROLES = tuple(UserRole)
_EDITOR_ROLES = (UserRole.SUPER_ADMIN, UserRole.MANAGER, UserRole.AGENT, UserRole.CALL_CENTER)


def build_policy_response(user: UserContext, policy: Policy) -> PolicyResponse:
    """Serialize a policy and apply the caller's redactions."""
    customer = policy.customer
    agent = customer.created_by_agent if customer is not None else None
    processor = policy.assigned_processor
    decision = decide_policy_access(user, policy)

    payload = {
        "id": policy.id,
        "customer_id": policy.customer_id,
        "customer_name": customer.full_name if customer is not None else None,
        "customer_email": customer.email if customer is not None else None,
        "customer_phone": customer.phone if customer is not None else None,
        "status": policy.status,
        "commission_status": policy.commission_status.value
        if hasattr(policy.commission_status, "value")
        else policy.commission_status,
        "insurance_company": policy.insurance_company,
        "marketplace_id": policy.marketplace_id,
        "policy_number": policy.policy_number,
        "plan_name": policy.plan_name,
        "monthly_premium": policy.monthly_premium,
        "tax_credit": policy.tax_credit,
        "effective_date": policy.effective_date,
        "plan_link": policy.plan_link,
        "aor_link": policy.aor_link,
        "notes": policy.notes,
        "agent_name": agent.full_name if agent is not None else None,
        "processor_name": processor.full_name if processor is not None else None,
        "assigned_processor_id": policy.assigned_processor_id,
        "can_edit": decision.can_edit,
        "created_at": policy.created_at,
        "updated_at": policy.updated_at,
    }
    return PolicyResponse(**apply_redactions(payload, decision))


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Policy not found")


@router.get(
    "/",
    response_model=PolicyListResponse,
    dependencies=[Depends(require_roles(*_ALL_ROLES))],
)
async def list_policies(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
    search: str | None = Query(default=None, max_length=100),
    status_filter: PolicyStatus | None = Query(default=None, alias="status"),
    insurance_company: str | None = Query(default=None, max_length=100),
    start_date: date | None = None,
    end_date: date | None = None,
) -> PolicyListResponse:
    """List policies visible to the current user's role and data scope."""
    policies, total = await policy_service.list_policies(
        session,
        user,
        offset=offset,
        limit=limit,
        search=search,
        status=status_filter,
        insurance_company=insurance_company,
        start_date=start_date,
        end_date=end_date,
    )
    return PolicyListResponse(
        data=[build_policy_response(user, p) for p in policies],
        pagination=Pagination(
            total=total,
            offset=offset,
            limit=limit,
            has_more=(offset + limit < total),
        ),
    )


@router.post(
    "/",
    response_model=PolicyResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(UserRole.SUPER_ADMIN, UserRole.MANAGER, UserRole.AGENT))],
)
async def create_policy(
    body: PolicyCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PolicyResponse:
    """Open a new policy for an existing customer."""
    fields = body.model_dump(exclude={"customer_id"}, exclude_none=True)
    policy = await policy_service.create_policy(session, user, body.customer_id, **fields)
    if policy is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return build_policy_response(user, policy)


@router.get(
    "/{policy_id}",
    response_model=PolicyResponse,
    dependencies=[Depends(require_roles(*_ALL_ROLES))],
)
async def get_policy(
    policy_id: uuid.UUID,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PolicyResponse:
    """Get a single policy. Returns 404 for out-of-scope resources."""
    policy = await policy_service.get_policy(session, user, policy_id)
    if policy is None:
        raise _not_found()
    return build_policy_response(user, policy)


@router.get(
    "/{policy_id}/access",
    response_model=PolicyAccessResponse,
    dependencies=[Depends(require_roles(*_ALL_ROLES))],
)
async def get_policy_access(
    policy_id: uuid.UUID,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PolicyAccessResponse:
    """Tell the UI whether to show the edit form."""
    policy = await policy_service.get_policy(session, user, policy_id)
    if policy is None:
        raise _not_found()
    decision = decide_policy_access(user, policy)
    return PolicyAccessResponse(
        policy_id=policy.id,
        can_view=decision.can_view,
        can_edit=decision.can_edit,
        redacted_fields=sorted(decision.redacted_fields),
    )


async def _run_update(coro):
    try:
        policy = await coro
    except PolicyEditForbiddenError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except InvalidTransitionError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    if policy is None:
        raise _not_found()
    return policy


@router.patch(
    "/{policy_id}",
    response_model=PolicyResponse,
    dependencies=[Depends(require_roles(*_EDITOR_ROLES))],
)
async def update_policy(
    policy_id: uuid.UUID,
    body: PolicyUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PolicyResponse:
    """Submit the policy edit form."""
    changes = body.model_dump(exclude_unset=True)
    policy = await _run_update(policy_service.update_policy(session, user, policy_id, changes))
    return build_policy_response(user, policy)


@router.post(
    "/{policy_id}/status",
    response_model=PolicyResponse,
    dependencies=[Depends(require_roles(*_EDITOR_ROLES))],
)
async def update_policy_status(
    policy_id: uuid.UUID,
    body: PolicyStatusUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PolicyResponse:
    """Move a policy to another status column."""
    policy = await _run_update(
        policy_service.update_policy_status(session, user, policy_id, body.status)
    )
    return build_policy_response(user, policy)


@router.post(
    "/{policy_id}/enable-editing",
    response_model=PolicyResponse,
    dependencies=[Depends(require_roles(UserRole.SUPER_ADMIN, UserRole.MANAGER))],
)
async def enable_editing(
    policy_id: uuid.UUID,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PolicyResponse:
    """Supervisor override that reopens a policy for editing."""
    policy = await _run_update(
        policy_service.enable_editing_for_policy(session, user, policy_id)
    )
    return build_policy_response(user, policy)
