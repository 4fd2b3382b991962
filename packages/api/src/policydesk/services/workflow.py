# This project was developed with assistance from AI tools.
"""Policy status transition rules.

``PolicyStatus.valid_transitions()`` documents the intended workflow. It is
only enforced when ``STRICT_STATUS_TRANSITIONS`` is on; otherwise any known
status may be set, which is how the back office has always behaved.
"""

import logging

from db.enums import PolicyStatus

logger = logging.getLogger(__name__)


class InvalidTransitionError(ValueError):
    """Raised when a policy status transition is not allowed."""

    pass


def check_transition(
    current: PolicyStatus | str | None,
    target: PolicyStatus | str,
    *,
    strict: bool = False,
) -> PolicyStatus:
    """Validate moving a policy from ``current`` to ``target``.

    Returns the target as a PolicyStatus. Same-state updates always pass.

    Raises:
        InvalidTransitionError: ``target`` is not a known status, or strict
            mode is on and the move is not in the transition table.
    """
    try:
        target = PolicyStatus(target)
    except ValueError as exc:
        raise InvalidTransitionError(f"Unknown policy status '{target}'.") from exc

    current = PolicyStatus(current) if current is not None else PolicyStatus.NEW_LEAD
    if current == target or not strict:
        return target

    allowed = PolicyStatus.valid_transitions().get(current, frozenset())
    if target not in allowed:
        logger.info("Rejected policy transition %s -> %s", current.value, target.value)
        raise InvalidTransitionError(
            f"Cannot transition from '{current.value}' to '{target.value}'. "
            f"Allowed: {sorted(s.value for s in allowed) if allowed else 'none'}."
        )
    return target
