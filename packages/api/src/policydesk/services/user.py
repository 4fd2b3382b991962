# This project was developed with assistance from AI tools.
"""Staff user administration and manager team views."""

import logging
import uuid

from db import Customer, Policy, ProcessorManagerAssignment, User
from db.enums import UserRole
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.auth import UserContext

logger = logging.getLogger(__name__)


class UserConflictError(Exception):
    """Raised when a user id or email is already registered."""

    pass


class InvalidAssignmentError(ValueError):
    """Raised when a hierarchy assignment references the wrong kind of user."""

    pass


async def list_users(
    session: AsyncSession,
    *,
    search: str | None = None,
    role: UserRole | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[User], int]:
    stmt = select(User)
    count_stmt = select(func.count(User.id))
    if search:
        pattern = f"%{search}%"
        clause = or_(
            User.first_name.ilike(pattern),
            User.last_name.ilike(pattern),
            User.email.ilike(pattern),
        )
        stmt = stmt.where(clause)
        count_stmt = count_stmt.where(clause)
    if role is not None:
        stmt = stmt.where(User.role == role)
        count_stmt = count_stmt.where(User.role == role)

    total = (await session.execute(count_stmt)).scalar() or 0
    stmt = stmt.order_by(User.created_at.desc()).offset(offset).limit(limit)
    return list((await session.execute(stmt)).scalars().all()), total


async def _require_manager(session: AsyncSession, manager_id: uuid.UUID) -> None:
    manager = await session.get(User, manager_id)
    if manager is None or manager.role != UserRole.MANAGER:
        raise InvalidAssignmentError(f"User {manager_id} is not a manager")


async def create_user(
    session: AsyncSession,
    admin: UserContext,
    **fields,
) -> User:
    """Register a staff account.

    Raises:
        UserConflictError: id or email already taken.
        InvalidAssignmentError: ``manager_id`` is not a manager.
    """
    if fields.get("manager_id") is not None:
        await _require_manager(session, fields["manager_id"])

    user = User(**fields)
    session.add(user)
    try:
        await session.flush()
        user_id = user.id
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise UserConflictError("A user with this id or email already exists") from exc
    logger.info("User %s created by %s with role %s", user_id, admin.user_id, fields.get("role"))
    return await session.get(User, user_id)


async def update_user_role(
    session: AsyncSession,
    admin: UserContext,
    user_id: uuid.UUID,
    role: UserRole,
) -> User | None:
    user = await session.get(User, user_id)
    if user is None:
        return None
    previous = user.role
    user.role = role
    await session.commit()
    logger.info(
        "Role of %s changed %s -> %s by %s",
        user_id,
        previous.value if hasattr(previous, "value") else previous,
        role.value,
        admin.user_id,
    )
    return user


async def list_managers(session: AsyncSession) -> list[User]:
    stmt = (
        select(User)
        .where(User.role == UserRole.MANAGER, User.is_active.is_(True))
        .order_by(User.first_name, User.last_name)
    )
    return list((await session.execute(stmt)).scalars().all())


async def set_processor_managers(
    session: AsyncSession,
    admin: UserContext,
    processor_id: uuid.UUID,
    manager_ids: list[uuid.UUID],
) -> list[uuid.UUID] | None:
    """Replace the set of managers a processor works for.

    Returns the new manager ids, or None when the processor does not exist.
    """
    processor = await session.get(User, processor_id)
    if processor is None:
        return None
    if processor.role != UserRole.PROCESSOR:
        raise InvalidAssignmentError(f"User {processor_id} is not a processor")

    unique_ids = list(dict.fromkeys(manager_ids))
    if unique_ids:
        found = (
            await session.execute(
                select(User.id).where(User.id.in_(unique_ids), User.role == UserRole.MANAGER)
            )
        ).scalars().all()
        missing = set(unique_ids) - set(found)
        if missing:
            raise InvalidAssignmentError(
                f"Not managers: {sorted(str(m) for m in missing)}"
            )

    await session.execute(
        delete(ProcessorManagerAssignment).where(
            ProcessorManagerAssignment.processor_id == processor_id
        )
    )
    session.add_all(
        [ProcessorManagerAssignment(processor_id=processor_id, manager_id=m) for m in unique_ids]
    )
    await session.commit()
    logger.info(
        "Processor %s now assigned to %d managers by %s",
        processor_id,
        len(unique_ids),
        admin.user_id,
    )
    return unique_ids


async def get_manager_team(
    session: AsyncSession,
    manager_id: uuid.UUID,
) -> list[tuple[User, int, int]]:
    """Direct reports with their customer and policy counts."""
    customer_count = (
        select(func.count(Customer.id))
        .where(Customer.created_by_agent_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    policy_count = (
        select(func.count(Policy.id))
        .join(Customer, Customer.id == Policy.customer_id)
        .where(Customer.created_by_agent_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    stmt = (
        select(User, customer_count, policy_count)
        .where(User.manager_id == manager_id)
        .order_by(User.first_name, User.last_name)
    )
    return [tuple(row) for row in (await session.execute(stmt)).all()]
