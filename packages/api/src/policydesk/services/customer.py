# This project was developed with assistance from AI tools.
"""Customer listing, detail, full intake, payment method lookup and lead reassignment."""

import logging
import uuid

from db import Customer, Dependent, PaymentMethod, Policy, User
from db.enums import CommissionStatus, PolicyStatus, UserRole
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.crypto import decrypt_value, encrypt_value
from ..middleware.pii import mask_ssn
from ..schemas.auth import UserContext
from ..schemas.customer import IntakeCreate
from ..services.scope import apply_customer_scope

logger = logging.getLogger(__name__)


class IntakeError(ValueError):
    """Raised when an intake cannot be accepted for the submitting agent."""

    pass


class LeadAssignmentError(ValueError):
    """Raised when a lead cannot be handed to the requested agent."""

    pass


async def list_customers(
    session: AsyncSession,
    user: UserContext,
    *,
    search: str | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[tuple[Customer, int]], int]:
    """Return (customer, policy_count) rows visible to the caller, newest first."""
    count_stmt = apply_customer_scope(select(func.count(Customer.id)), user.data_scope, user)
    policy_count = (
        select(func.count(Policy.id))
        .where(Policy.customer_id == Customer.id)
        .correlate(Customer)
        .scalar_subquery()
    )
    stmt = select(Customer, policy_count).options(selectinload(Customer.created_by_agent))
    stmt = apply_customer_scope(stmt, user.data_scope, user)
    if search:
        count_stmt = count_stmt.where(Customer.full_name.ilike(f"%{search}%"))
        stmt = stmt.where(Customer.full_name.ilike(f"%{search}%"))

    total = (await session.execute(count_stmt)).scalar() or 0
    stmt = stmt.order_by(Customer.created_at.desc()).offset(offset).limit(limit)
    rows = (await session.execute(stmt)).all()
    return [tuple(row) for row in rows], total


async def get_customer(
    session: AsyncSession,
    user: UserContext,
    customer_id: uuid.UUID,
) -> Customer | None:
    """Customer with dependents and policies, or None if out of scope."""
    stmt = (
        select(Customer)
        .options(
            selectinload(Customer.created_by_agent),
            selectinload(Customer.dependents),
            selectinload(Customer.policies).selectinload(Policy.assigned_processor),
        )
        .where(Customer.id == customer_id)
    )
    stmt = apply_customer_scope(stmt, user.data_scope, user)
    result = await session.execute(stmt)
    return result.unique().scalar_one_or_none()


def can_see_ssn(user: UserContext, customer: Customer) -> bool:
    """Clear SSN is for supervisors and the agent who captured the customer."""
    if user.role in (UserRole.SUPER_ADMIN, UserRole.MANAGER):
        return True
    return user.role == UserRole.AGENT and customer.created_by_agent_id == user.user_id


def reveal_ssn(user: UserContext, customer: Customer) -> str | None:
    """Decrypted SSN for permitted callers, ``***-**-1234`` for everyone else."""
    clear = decrypt_value(customer.ssn_encrypted)
    if clear is None or can_see_ssn(user, customer):
        return clear
    return mask_ssn(clear)


async def create_full_application(
    session: AsyncSession,
    user: UserContext,
    data: IntakeCreate,
) -> dict[str, object]:
    """Create customer, first policy, dependents and payment method together.

    The submitting agent must report to a manager so the new customer
    lands in a team.

    Raises:
        IntakeError: the agent has no manager assigned.
    """
    manager_id = (
        await session.execute(select(User.manager_id).where(User.id == user.user_id))
    ).scalar_one_or_none()
    if manager_id is None:
        logger.warning("Intake rejected: agent %s has no manager", user.user_id)
        raise IntakeError("Agent has no manager assigned")

    customer_fields = data.model_dump(exclude={"ssn", "policy", "dependents", "payment_method"})
    customer = Customer(
        **customer_fields,
        ssn_encrypted=encrypt_value(data.ssn),
        created_by_agent_id=user.user_id,
    )
    session.add(customer)
    await session.flush()

    policy = Policy(
        customer_id=customer.id,
        status=PolicyStatus.NEW_LEAD,
        commission_status=CommissionStatus.PENDING,
        updated_by_id=user.user_id,
        **data.policy.model_dump(exclude_none=True),
    )
    session.add(policy)
    await session.flush()

    for dep in data.dependents:
        session.add(
            Dependent(
                customer_id=customer.id,
                full_name=dep.full_name,
                relationship_to_customer=dep.relationship,
                birth_date=dep.birth_date,
                immigration_status=dep.immigration_status,
                applies_to_policy=dep.applies_to_policy,
            )
        )

    payment = None
    if data.payment_method is not None:
        payment = PaymentMethod(policy_id=policy.id, **data.payment_method.model_dump())
        session.add(payment)

    await session.flush()
    # capture before commit expires the objects
    created = {
        "customer_id": customer.id,
        "policy_id": policy.id,
        "dependent_count": len(data.dependents),
        "payment_method_id": payment.id if payment is not None else None,
    }
    await session.commit()
    logger.info(
        "Intake by %s: customer=%s policy=%s dependents=%d",
        user.user_id,
        created["customer_id"],
        created["policy_id"],
        created["dependent_count"],
    )
    return created


async def get_payment_method(
    session: AsyncSession,
    customer_id: uuid.UUID,
    policy_id: uuid.UUID,
) -> PaymentMethod | None:
    stmt = (
        select(PaymentMethod)
        .join(PaymentMethod.policy)
        .where(Policy.id == policy_id, Policy.customer_id == customer_id)
    )
    return (await session.execute(stmt)).scalars().first()


async def customer_visible(
    session: AsyncSession,
    user: UserContext,
    customer_id: uuid.UUID,
) -> bool:
    stmt = apply_customer_scope(
        select(Customer.id).where(Customer.id == customer_id), user.data_scope, user
    )
    return (await session.execute(stmt)).scalar_one_or_none() is not None


async def assign_lead_to_agent(
    session: AsyncSession,
    user: UserContext,
    customer_id: uuid.UUID,
    agent_id: uuid.UUID,
) -> tuple[uuid.UUID, User] | None:
    """Hand a customer to another agent by rewriting ``created_by_agent_id``.

    Managers may only move their own team's customers, and only to their
    own active agents. Returns None when the customer is out of scope.

    Raises:
        LeadAssignmentError: the target is not an active agent the caller manages.
    """
    stmt = apply_customer_scope(
        select(Customer).where(Customer.id == customer_id), user.data_scope, user
    )
    customer = (await session.execute(stmt)).scalar_one_or_none()
    if customer is None:
        return None

    agent = await session.get(User, agent_id)
    if agent is None or agent.role != UserRole.AGENT or not agent.is_active:
        raise LeadAssignmentError(f"User {agent_id} is not an active agent")
    if user.role == UserRole.MANAGER and agent.manager_id != user.user_id:
        raise LeadAssignmentError(f"Agent {agent_id} is not on your team")

    previous = customer.created_by_agent_id
    customer.created_by_agent_id = agent.id
    await session.commit()
    logger.info(
        "Customer %s reassigned %s -> %s by %s", customer_id, previous, agent_id, user.user_id
    )
    return customer_id, agent
