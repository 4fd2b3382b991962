# This project was developed with assistance from AI tools.
"""Policy access decisions.

One pure function decides, for an actor and a policy, whether the policy
may be viewed, whether it may be edited, and which fields must be
redacted on read. Every policy read and write path goes through
``decide_policy_access`` so the list view, the detail view and the
mutation endpoints cannot disagree.

Edit rules, first match wins:

1. super_admin and manager may always edit.
2. Nobody else may edit a processed policy (past the intake statuses).
3. agent and call_center may edit a policy sitting in ``in_review``.
4. The owning agent may edit their customer's unprocessed policy.
5. Otherwise no edit.

Call center staff reading a processed policy get a reduced projection.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any

from db.enums import PolicyStatus, UserRole

from ..schemas.auth import UserContext

RESTRICTED = "Restringido"
RESTRICTED_NOTES = "Restricted information after sale."

# Replaced with the RESTRICTED marker
_MARKED_FIELDS = frozenset(
    {"marketplace_id", "commission_status", "customer_email", "customer_phone"}
)
# Dropped to null
_NULLED_FIELDS = frozenset(
    {
        "tax_credit",
        "plan_link",
        "aor_link",
        "agent_name",
        "processor_name",
        "assigned_processor_id",
        "policy_number",
        "plan_name",
    }
)
CALL_CENTER_REDACTIONS = _MARKED_FIELDS | _NULLED_FIELDS | {"notes"}

_SUPERVISORS = frozenset({UserRole.SUPER_ADMIN, UserRole.MANAGER})


@dataclass(frozen=True)
class AccessDecision:
    can_view: bool
    can_edit: bool
    redacted_fields: frozenset[str] = field(default_factory=frozenset)


def is_processed(status: PolicyStatus | str) -> bool:
    """True once a policy has left the intake statuses."""
    return PolicyStatus(status).is_processed


def _owner_id(policy: Any) -> uuid.UUID | None:
    customer = getattr(policy, "customer", None)
    return getattr(customer, "created_by_agent_id", None)


def can_edit_policy(actor: UserContext, policy: Any) -> bool:
    """Apply the edit rules to ``policy`` (needs ``status`` and ``customer``)."""
    if actor.role in _SUPERVISORS:
        return True
    status = PolicyStatus(policy.status)
    if status.is_processed:
        return False
    if actor.role in (UserRole.AGENT, UserRole.CALL_CENTER) and status == PolicyStatus.IN_REVIEW:
        return True
    if actor.role == UserRole.AGENT and _owner_id(policy) == actor.user_id:
        return True
    return False


def _can_view(actor: UserContext, policy: Any) -> bool:
    if actor.role == UserRole.AGENT:
        return _owner_id(policy) == actor.user_id
    if actor.role == UserRole.PROCESSOR:
        return getattr(policy, "assigned_processor_id", None) == actor.user_id
    # Remaining roles are bounded by the query-level data scope.
    return True


def decide_policy_access(actor: UserContext, policy: Any) -> AccessDecision:
    redacted: frozenset[str] = frozenset()
    if actor.role == UserRole.CALL_CENTER and is_processed(policy.status):
        redacted = CALL_CENTER_REDACTIONS
    return AccessDecision(
        can_view=_can_view(actor, policy),
        can_edit=can_edit_policy(actor, policy),
        redacted_fields=redacted,
    )


def apply_redactions(payload: dict[str, Any], decision: AccessDecision) -> dict[str, Any]:
    """Return a copy of a serialized policy with the decision's redactions applied."""
    if not decision.redacted_fields:
        return payload
    result = dict(payload)
    for name in decision.redacted_fields:
        if name not in result:
            continue
        if name in _MARKED_FIELDS:
            result[name] = RESTRICTED
        elif name == "notes":
            result[name] = RESTRICTED_NOTES
        else:
            result[name] = None
    return result
