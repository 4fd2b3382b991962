# This project was developed with assistance from AI tools.
"""Authentication and authorization schemas."""

import uuid

from db.enums import UserRole
from pydantic import BaseModel, ConfigDict, Field


class DataScope(BaseModel):
    """Data visibility rules injected by RBAC middleware."""

    model_config = ConfigDict(frozen=True)

    own_customers_of: uuid.UUID | None = None
    team_of: uuid.UUID | None = None
    assigned_processor: uuid.UUID | None = None
    pii_mask: bool = False
    full_pipeline: bool = False


class UserContext(BaseModel):
    """Injected by auth middleware into every authenticated request."""

    model_config = ConfigDict(frozen=True)

    user_id: uuid.UUID
    role: UserRole
    email: str
    name: str
    data_scope: DataScope = Field(default_factory=DataScope)


class TokenPayload(BaseModel):
    """Decoded JWT token claims from Keycloak."""

    sub: str
    email: str = ""
    preferred_username: str = ""
    name: str = ""
    realm_access: dict = Field(default_factory=dict)
