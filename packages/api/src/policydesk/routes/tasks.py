# This project was developed with assistance from AI tools.
"""Task routes: customer task updates and the post-sale board."""

import uuid

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.task import (
    BoardResponse,
    CustomerTaskResponse,
    CustomerTaskUpdate,
    MoveTaskRequest,
    PostSaleTaskCreate,
    PostSaleTaskResponse,
    PostSaleTaskUpdate,
)
from ..services import task as task_service

router = APIRouter()

_ALL_ROLES = tuple(UserRole)
_POST_SALE_ROLES = (UserRole.CUSTOMER_SERVICE, UserRole.MANAGER, UserRole.SUPER_ADMIN)


def _task_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


@router.get(
    "/post-sale",
    response_model=BoardResponse,
    dependencies=[Depends(require_roles(*_POST_SALE_ROLES))],
)
async def get_board(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> BoardResponse:
    """Post-sale cards grouped by board column."""
    board = await task_service.get_board(session)
    return BoardResponse(
        columns={
            column: [PostSaleTaskResponse.model_validate(t) for t in tasks]
            for column, tasks in board.items()
        }
    )


@router.post(
    "/post-sale",
    response_model=PostSaleTaskResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*_POST_SALE_ROLES))],
)
async def create_post_sale_task(
    body: PostSaleTaskCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PostSaleTaskResponse:
    task = await task_service.create_post_sale_task(
        session, user, **body.model_dump(exclude_none=True)
    )
    return PostSaleTaskResponse.model_validate(task)


@router.patch(
    "/post-sale/{task_id}",
    response_model=PostSaleTaskResponse,
    dependencies=[Depends(require_roles(*_POST_SALE_ROLES))],
)
async def update_post_sale_task(
    task_id: uuid.UUID,
    body: PostSaleTaskUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PostSaleTaskResponse:
    task = await task_service.update_post_sale_task(
        session, user, task_id, body.model_dump(exclude_unset=True)
    )
    if task is None:
        raise _task_not_found()
    return PostSaleTaskResponse.model_validate(task)


@router.post(
    "/post-sale/{task_id}/move",
    response_model=PostSaleTaskResponse,
    dependencies=[Depends(require_roles(*_POST_SALE_ROLES))],
)
async def move_post_sale_task(
    task_id: uuid.UUID,
    body: MoveTaskRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> PostSaleTaskResponse:
    """Drag-and-drop a card to another column/position."""
    task = await task_service.move_post_sale_task(
        session, user, task_id, body.dest_column, body.dest_index
    )
    if task is None:
        raise _task_not_found()
    return PostSaleTaskResponse.model_validate(task)


@router.patch(
    "/{task_id}",
    response_model=CustomerTaskResponse,
    dependencies=[Depends(require_roles(*_ALL_ROLES))],
)
async def update_customer_task(
    task_id: uuid.UUID,
    body: CustomerTaskUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> CustomerTaskResponse:
    """Update a customer task. Completing it stamps ``completed_at``."""
    task = await task_service.update_customer_task(
        session, user, task_id, body.model_dump(exclude_unset=True)
    )
    if task is None:
        raise _task_not_found()
    return CustomerTaskResponse.model_validate(task)
