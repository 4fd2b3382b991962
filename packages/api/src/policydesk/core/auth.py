# This project was developed with assistance from AI tools.
"""Pure auth utility functions with no FastAPI or HTTP dependencies.

Kept apart from ``middleware/auth.py`` so services and tests can build a
scope without pulling in FastAPI/Starlette.
"""

import uuid

from db.enums import UserRole

from ..schemas.auth import DataScope


def build_data_scope(role: UserRole, user_id: uuid.UUID) -> DataScope:
    """Build data scope rules based on the user's role."""
    if role == UserRole.AGENT:
        return DataScope(own_customers_of=user_id)
    if role == UserRole.MANAGER:
        return DataScope(team_of=user_id)
    if role == UserRole.PROCESSOR:
        return DataScope(assigned_processor=user_id)
    if role == UserRole.SUPER_ADMIN:
        return DataScope(full_pipeline=True)
    if role in (UserRole.CALL_CENTER, UserRole.CUSTOMER_SERVICE, UserRole.COMMISSION_ANALYST):
        return DataScope(full_pipeline=True, pii_mask=True)
    # unknown -- minimal access
    return DataScope()
