# This project was developed with assistance from AI tools.
"""Staff user administration routes."""

import uuid

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas import Pagination
from ..schemas.user import (
    ProcessorManagersUpdate,
    RoleUpdate,
    TeamMember,
    UserCreate,
    UserListResponse,
    UserResponse,
)
from ..services import user as user_service
from ..services.user import InvalidAssignmentError, UserConflictError

router = APIRouter()


@router.get(
    "/",
    response_model=UserListResponse,
    dependencies=[Depends(require_roles(UserRole.SUPER_ADMIN))],
)
async def list_users(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
    search: str | None = Query(default=None, max_length=100),
    role: UserRole | None = None,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> UserListResponse:
    users, total = await user_service.list_users(
        session, search=search, role=role, offset=offset, limit=limit
    )
    return UserListResponse(
        data=[UserResponse.model_validate(u) for u in users],
        pagination=Pagination(
            total=total, offset=offset, limit=limit, has_more=(offset + limit < total)
        ),
    )


@router.post(
    "/",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(UserRole.SUPER_ADMIN))],
)
async def create_user(
    body: UserCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> UserResponse:
    try:
        created = await user_service.create_user(session, user, **body.model_dump())
    except UserConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except InvalidAssignmentError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return UserResponse.model_validate(created)


@router.get(
    "/managers",
    response_model=list[UserResponse],
    dependencies=[Depends(require_roles(UserRole.SUPER_ADMIN))],
)
async def list_managers(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> list[UserResponse]:
    return [UserResponse.model_validate(m) for m in await user_service.list_managers(session)]


@router.get(
    "/team",
    response_model=list[TeamMember],
    dependencies=[Depends(require_roles(UserRole.MANAGER))],
)
async def get_team(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> list[TeamMember]:
    """The calling manager's direct reports and their book size."""
    rows = await user_service.get_manager_team(session, user.user_id)
    return [
        TeamMember(
            id=member.id,
            name=member.full_name,
            email=member.email,
            role=member.role,
            customer_count=customers or 0,
            policy_count=policies or 0,
        )
        for member, customers, policies in rows
    ]


@router.patch(
    "/{user_id}/role",
    response_model=UserResponse,
    dependencies=[Depends(require_roles(UserRole.SUPER_ADMIN))],
)
async def update_role(
    user_id: uuid.UUID,
    body: RoleUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> UserResponse:
    updated = await user_service.update_user_role(session, user, user_id, body.role)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse.model_validate(updated)


@router.put(
    "/processors/{processor_id}/managers",
    response_model=list[uuid.UUID],
    dependencies=[Depends(require_roles(UserRole.SUPER_ADMIN))],
)
async def set_processor_managers(
    processor_id: uuid.UUID,
    body: ProcessorManagersUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> list[uuid.UUID]:
    """Replace which managers' teams a processor works for."""
    try:
        manager_ids = await user_service.set_processor_managers(
            session, user, processor_id, body.manager_ids
        )
    except InvalidAssignmentError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    if manager_ids is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return manager_ids
