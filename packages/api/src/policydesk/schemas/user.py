# This project was developed with assistance from AI tools.
"""Staff user administration schemas."""

import uuid
from datetime import datetime

from db.enums import UserRole
from pydantic import BaseModel, ConfigDict, Field

from . import Pagination


class UserCreate(BaseModel):
    """Register a staff account. ``id`` must match the Keycloak subject."""

    id: uuid.UUID
    email: str = Field(min_length=3, max_length=255)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: UserRole
    manager_id: uuid.UUID | None = None


class RoleUpdate(BaseModel):
    role: UserRole


class ProcessorManagersUpdate(BaseModel):
    """Full replacement of the managers a processor works for."""

    manager_ids: list[uuid.UUID]


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    role: UserRole
    manager_id: uuid.UUID | None = None
    is_active: bool
    created_at: datetime


class UserListResponse(BaseModel):
    data: list[UserResponse]
    pagination: Pagination


class TeamMember(BaseModel):
    """Agent on a manager's team with their book size."""

    id: uuid.UUID
    name: str
    email: str
    role: UserRole
    customer_count: int = 0
    policy_count: int = 0
