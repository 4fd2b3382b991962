# This project was developed with assistance from AI tools.
"""Policy change history.

Changes to tracked policy fields are recorded as completed ``general``
customer tasks so they show up in the customer's timeline. The task is
added to the caller's session and committed together with the policy
update, never on its own.
"""

import enum
import logging
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any

from db import CustomerTask, Policy
from db.enums import TaskPriority, TaskStatus, TaskType
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.auth import UserContext

logger = logging.getLogger(__name__)

TRACKED_FIELDS: dict[str, str] = {
    "status": "Status",
    "insurance_company": "Insurance company",
    "monthly_premium": "Monthly premium",
    "marketplace_id": "Marketplace ID",
    "effective_date": "Effective date",
}

POLICY_UPDATE_TITLE = "Policy updated"


def snapshot(policy: Any) -> dict[str, Any]:
    """Capture the tracked fields of a policy."""
    return {name: getattr(policy, name, None) for name in TRACKED_FIELDS}


def _normalize(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, Decimal):
        return value.quantize(Decimal("0.01"))
    return value


def _format(value: Any) -> str:
    value = _normalize(value)
    if value is None or value == "":
        return "(empty)"
    if isinstance(value, date | datetime):
        return value.isoformat()
    return str(value)


def diff_snapshots(before: dict[str, Any], after: dict[str, Any]) -> list[tuple[str, Any, Any]]:
    """Return ``(field, old, new)`` for every tracked field that changed."""
    changes = []
    for name in TRACKED_FIELDS:
        old, new = before.get(name), after.get(name)
        if _normalize(old) != _normalize(new):
            changes.append((name, old, new))
    return changes


def describe_changes(changes: list[tuple[str, Any, Any]]) -> str:
    """One line per changed field, old value then new value."""
    return "\n".join(
        f"{TRACKED_FIELDS[name]}: {_format(old)} -> {_format(new)}" for name, old, new in changes
    )


def record_policy_change(
    session: AsyncSession,
    user: UserContext,
    policy: Policy,
    before: dict[str, Any],
    *,
    title: str = POLICY_UPDATE_TITLE,
    always: bool = False,
) -> CustomerTask | None:
    """Add an audit task for the tracked-field diff, or nothing when unchanged.

    With ``always=True`` a task is written even when no tracked field moved
    (supervisor overrides are logged regardless).

    Does not flush or commit; the caller owns the transaction.
    """
    changes = diff_snapshots(before, snapshot(policy))
    if not changes and not always:
        return None

    task = CustomerTask(
        customer_id=policy.customer_id,
        policy_id=policy.id,
        title=title,
        description=describe_changes(changes) or "No tracked field changed.",
        type=TaskType.GENERAL,
        priority=TaskPriority.LOW,
        status=TaskStatus.COMPLETED,
        created_by_id=user.user_id,
        completed_at=datetime.now(UTC),
    )
    session.add(task)
    logger.info(
        "Policy %s changed by %s: %s",
        policy.id,
        user.user_id,
        ", ".join(name for name, _, _ in changes),
    )
    return task
