# This project was developed with assistance from AI tools.
"""Processing queue routes."""

import uuid

from db import get_db
from db.enums import PolicyStatus, UserRole
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..routes.policies import build_policy_response
from ..schemas import Pagination
from ..schemas.policy import PolicyResponse
from ..schemas.processing import (
    AssignProcessorRequest,
    MissingDocsRequest,
    ProcessingQueueResponse,
    ProcessingStats,
    ProcessingStatusUpdate,
    ProcessorSummary,
)
from ..services import processing as processing_service
from ..services.processing import ProcessorNotFoundError
from ..services.workflow import InvalidTransitionError

router = APIRouter()

_QUEUE_ROLES = (UserRole.PROCESSOR, UserRole.MANAGER, UserRole.SUPER_ADMIN)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Policy not found")


@router.get(
    "/",
    response_model=ProcessingQueueResponse,
    dependencies=[Depends(require_roles(*_QUEUE_ROLES))],
)
async def get_queue(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
    status_filter: PolicyStatus | None = Query(default=None, alias="status"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> ProcessingQueueResponse:
    """Policies in the caller's processing queue."""
    policies, total = await processing_service.get_processing_queue(
        session, user, status=status_filter, offset=offset, limit=limit
    )
    return ProcessingQueueResponse(
        data=[build_policy_response(user, p) for p in policies],
        pagination=Pagination(
            total=total, offset=offset, limit=limit, has_more=(offset + limit < total)
        ),
    )


@router.get(
    "/stats",
    response_model=ProcessingStats,
    dependencies=[Depends(require_roles(*_QUEUE_ROLES))],
)
async def get_stats(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ProcessingStats:
    return ProcessingStats(**await processing_service.get_processing_stats(session, user))


@router.get(
    "/processors",
    response_model=list[ProcessorSummary],
    dependencies=[Depends(require_roles(*_QUEUE_ROLES))],
)
async def list_processors(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> list[ProcessorSummary]:
    processors = await processing_service.list_available_processors(session)
    return [ProcessorSummary(id=p.id, name=p.full_name, email=p.email) for p in processors]


@router.post(
    "/{policy_id}/assign",
    response_model=PolicyResponse,
    dependencies=[Depends(require_roles(*_QUEUE_ROLES))],
)
async def assign_policy(
    policy_id: uuid.UUID,
    body: AssignProcessorRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PolicyResponse:
    try:
        policy = await processing_service.assign_policy(
            session, user, policy_id, body.processor_id
        )
    except ProcessorNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    if policy is None:
        raise _not_found()
    return build_policy_response(user, policy)


@router.post(
    "/{policy_id}/missing-docs",
    response_model=PolicyResponse,
    dependencies=[Depends(require_roles(UserRole.PROCESSOR, UserRole.SUPER_ADMIN))],
)
async def request_missing_docs(
    policy_id: uuid.UUID,
    body: MissingDocsRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PolicyResponse:
    try:
        policy = await processing_service.request_missing_docs(
            session, user, policy_id, body.notes
        )
    except InvalidTransitionError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    if policy is None:
        raise _not_found()
    return build_policy_response(user, policy)


@router.post(
    "/{policy_id}/status",
    response_model=PolicyResponse,
    dependencies=[Depends(require_roles(*_QUEUE_ROLES))],
)
async def update_status(
    policy_id: uuid.UUID,
    body: ProcessingStatusUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PolicyResponse:
    """Move a queued policy through processing (e.g. to sent_to_carrier)."""
    try:
        policy = await processing_service.update_processing_status(
            session, user, policy_id, body.status, notes=body.notes
        )
    except InvalidTransitionError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    if policy is None:
        raise _not_found()
    return build_policy_response(user, policy)
