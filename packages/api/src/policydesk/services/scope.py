# This project was developed with assistance from AI tools.
"""Shared data scope filtering for service queries.

Centralizes the DataScope -> SQL WHERE logic so that each resource service
applies the same rules. Ownership is expressed through subqueries on
``customers.created_by_agent_id`` so callers are free to join Customer
themselves (for search or projection) without double joins.
"""

import uuid

from db import Customer, Policy, User
from sqlalchemy import false, or_, select

from ..schemas.auth import DataScope, UserContext


def owner_clause(scope: DataScope):
    """WHERE clause on Customer.created_by_agent_id for agent/manager scopes.

    Managers see what they created plus what their direct reports created.
    The hierarchy is one level deep.
    """
    if scope.own_customers_of is not None:
        return Customer.created_by_agent_id == scope.own_customers_of
    if scope.team_of is not None:
        team = select(User.id).where(User.manager_id == scope.team_of)
        return or_(
            Customer.created_by_agent_id == scope.team_of,
            Customer.created_by_agent_id.in_(team),
        )
    return None


def team_member_ids(manager_id: uuid.UUID):
    """Subquery of the user ids a manager's scope covers, manager included."""
    return select(User.id).where(or_(User.id == manager_id, User.manager_id == manager_id))


def apply_data_scope(stmt, scope: DataScope, user: UserContext, *, join_to_policy=None):
    """Apply data scope filtering to a policy-rooted query.

    Args:
        stmt: A SQLAlchemy select statement.
        scope: The caller's DataScope.
        user: The caller's UserContext.
        join_to_policy: ORM relationship attribute to join to reach Policy
            (e.g., ``CommissionRecord.policy``). Pass ``None`` when querying
            Policy directly.

    Returns:
        The filtered statement.
    """
    if scope.full_pipeline:
        return stmt
    if join_to_policy is not None:
        stmt = stmt.join(join_to_policy)

    clause = owner_clause(scope)
    if clause is not None:
        return stmt.where(Policy.customer_id.in_(select(Customer.id).where(clause)))
    if scope.assigned_processor is not None:
        return stmt.where(Policy.assigned_processor_id == scope.assigned_processor)
    # Unknown role -- nothing visible
    return stmt.where(false())


def apply_customer_scope(stmt, scope: DataScope, user: UserContext):
    """Apply data scope filtering to a Customer-rooted query."""
    if scope.full_pipeline:
        return stmt
    clause = owner_clause(scope)
    if clause is not None:
        return stmt.where(clause)
    if scope.assigned_processor is not None:
        assigned = select(Policy.customer_id).where(
            Policy.assigned_processor_id == scope.assigned_processor
        )
        return stmt.where(Customer.id.in_(assigned))
    return stmt.where(false())
