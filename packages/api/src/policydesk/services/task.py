# This project was developed with assistance from AI tools.
"""Customer tasks and the post-sale task board."""

import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from db import Customer, CustomerTask, PostSaleTask
from db.enums import BoardColumn, TaskStatus
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.auth import UserContext
from ..services.board import Board, MoveCommand, status_for_column
from ..services.customer import customer_visible
from ..services.scope import apply_customer_scope

logger = logging.getLogger(__name__)

_TASK_UPDATABLE_FIELDS = frozenset(
    {"title", "description", "priority", "status", "assigned_to_id", "due_date", "notes"}
)
# Card status follows its board column, so only a move changes it
_POST_SALE_UPDATABLE_FIELDS = _TASK_UPDATABLE_FIELDS - {"status"}


def _apply_task_changes(
    task, changes: dict[str, Any], allowed: frozenset[str] = _TASK_UPDATABLE_FIELDS
) -> None:
    """Set fields and keep ``completed_at`` in step with the status."""
    previous = task.status
    for name, value in changes.items():
        if name not in allowed:
            continue
        if name == "status" and value is None:
            continue
        setattr(task, name, value)

    if task.status != previous:
        if task.status == TaskStatus.COMPLETED:
            task.completed_at = datetime.now(UTC)
        elif previous == TaskStatus.COMPLETED:
            task.completed_at = None


# ---------------------------------------------------------------------------
# Customer tasks
# ---------------------------------------------------------------------------


async def list_customer_tasks(
    session: AsyncSession,
    user: UserContext,
    customer_id: uuid.UUID,
) -> list[CustomerTask] | None:
    """Tasks on a customer, newest first. None when the customer is out of scope."""
    if not await customer_visible(session, user, customer_id):
        return None
    stmt = (
        select(CustomerTask)
        .where(CustomerTask.customer_id == customer_id)
        .order_by(CustomerTask.created_at.desc())
    )
    return list((await session.execute(stmt)).scalars().all())


async def create_customer_task(
    session: AsyncSession,
    user: UserContext,
    customer_id: uuid.UUID,
    **fields: Any,
) -> CustomerTask | None:
    if not await customer_visible(session, user, customer_id):
        return None
    task = CustomerTask(
        customer_id=customer_id,
        created_by_id=user.user_id,
        status=TaskStatus.PENDING,
        **fields,
    )
    session.add(task)
    await session.flush()
    task_id = task.id
    await session.commit()
    return await session.get(CustomerTask, task_id)


async def get_customer_task(
    session: AsyncSession,
    user: UserContext,
    task_id: uuid.UUID,
) -> CustomerTask | None:
    stmt = (
        select(CustomerTask)
        .join(Customer, Customer.id == CustomerTask.customer_id)
        .where(CustomerTask.id == task_id)
    )
    stmt = apply_customer_scope(stmt, user.data_scope, user)
    return (await session.execute(stmt)).scalar_one_or_none()


async def update_customer_task(
    session: AsyncSession,
    user: UserContext,
    task_id: uuid.UUID,
    changes: dict[str, Any],
) -> CustomerTask | None:
    task = await get_customer_task(session, user, task_id)
    if task is None:
        return None
    _apply_task_changes(task, changes)
    task.updated_at = datetime.now(UTC)
    await session.commit()
    return await get_customer_task(session, user, task_id)


# ---------------------------------------------------------------------------
# Post-sale board
# ---------------------------------------------------------------------------


async def get_board(session: AsyncSession) -> dict[BoardColumn, list[PostSaleTask]]:
    """All post-sale cards grouped by column in position order."""
    stmt = select(PostSaleTask).order_by(PostSaleTask.position, PostSaleTask.created_at)
    tasks = (await session.execute(stmt)).scalars().all()
    board: dict[BoardColumn, list[PostSaleTask]] = {column: [] for column in BoardColumn}
    for task in tasks:
        board[BoardColumn(task.board_column)].append(task)
    return board


async def create_post_sale_task(
    session: AsyncSession,
    user: UserContext,
    **fields: Any,
) -> PostSaleTask:
    """New cards go to the bottom of the pending column."""
    next_position = (
        await session.execute(
            select(func.coalesce(func.max(PostSaleTask.position) + 1, 0)).where(
                PostSaleTask.board_column == BoardColumn.PENDING.value
            )
        )
    ).scalar() or 0
    task = PostSaleTask(
        created_by_id=user.user_id,
        board_column=BoardColumn.PENDING.value,
        position=next_position,
        status=TaskStatus.PENDING,
        **fields,
    )
    session.add(task)
    await session.flush()
    task_id = task.id
    await session.commit()
    logger.info("Post-sale task %s created by %s", task_id, user.user_id)
    return await session.get(PostSaleTask, task_id)


async def update_post_sale_task(
    session: AsyncSession,
    user: UserContext,
    task_id: uuid.UUID,
    changes: dict[str, Any],
) -> PostSaleTask | None:
    task = await session.get(PostSaleTask, task_id)
    if task is None:
        return None
    _apply_task_changes(task, changes, _POST_SALE_UPDATABLE_FIELDS)
    task.updated_at = datetime.now(UTC)
    await session.commit()
    return task


async def move_post_sale_task(
    session: AsyncSession,
    user: UserContext,
    task_id: uuid.UUID,
    dest_column: BoardColumn,
    dest_index: int,
) -> PostSaleTask | None:
    """Drop a card into ``dest_column`` at ``dest_index`` and renumber positions.

    The move is applied to the column map loaded from the database; if
    persisting fails the transaction is rolled back and the command
    reverted. Last write wins.
    """
    task = await session.get(PostSaleTask, task_id)
    if task is None:
        return None

    source_column = task.board_column
    columns = {source_column, dest_column.value}
    stmt = (
        select(PostSaleTask)
        .where(PostSaleTask.board_column.in_(columns))
        .order_by(PostSaleTask.position, PostSaleTask.created_at)
    )
    cards = (await session.execute(stmt)).scalars().all()
    by_id = {card.id: card for card in cards}
    by_id.setdefault(task.id, task)

    board: Board = {column: [] for column in columns}
    for card in cards:
        board[card.board_column].append(card.id)
    if task.id not in board[source_column]:
        board[source_column].append(task.id)

    command = MoveCommand(task.id, source_column, dest_column.value, dest_index)
    command.apply(board)

    try:
        for column in columns:
            for position, card_id in enumerate(board[column]):
                card = by_id[card_id]
                card.board_column = column
                card.position = position
        previous = task.status
        task.status = status_for_column(dest_column)
        if task.status == TaskStatus.COMPLETED and previous != TaskStatus.COMPLETED:
            task.completed_at = datetime.now(UTC)
        elif task.status != TaskStatus.COMPLETED:
            task.completed_at = None
        task.updated_at = datetime.now(UTC)
        await session.commit()
    except SQLAlchemyError:
        await session.rollback()
        command.revert(board)
        logger.warning("Post-sale move of %s rolled back", task_id, exc_info=True)
        raise

    logger.info(
        "Post-sale task %s moved %s -> %s[%d] by %s",
        task_id,
        source_column,
        dest_column.value,
        dest_index,
        user.user_id,
    )
    return task
