# This project was developed with assistance from AI tools.
"""Customer task and post-sale board schemas."""

import uuid
from datetime import datetime

from db.enums import BoardColumn, TaskPriority, TaskStatus, TaskType
from pydantic import BaseModel, ConfigDict, Field


class CustomerTaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    type: TaskType = TaskType.GENERAL
    priority: TaskPriority = TaskPriority.MEDIUM
    policy_id: uuid.UUID | None = None
    assigned_to_id: uuid.UUID | None = None
    due_date: datetime | None = None
    notes: str | None = None


class CustomerTaskUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    assigned_to_id: uuid.UUID | None = None
    due_date: datetime | None = None
    notes: str | None = None


class CustomerTaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    customer_id: uuid.UUID
    policy_id: uuid.UUID | None = None
    title: str
    description: str | None = None
    type: TaskType
    priority: TaskPriority
    status: TaskStatus
    assigned_to_id: uuid.UUID | None = None
    created_by_id: uuid.UUID
    due_date: datetime | None = None
    completed_at: datetime | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class PostSaleTaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = None
    type: TaskType
    priority: TaskPriority = TaskPriority.MEDIUM
    customer_id: uuid.UUID | None = None
    policy_id: uuid.UUID | None = None
    assigned_to_id: uuid.UUID | None = None
    due_date: datetime | None = None
    notes: str | None = None


class PostSaleTaskUpdate(BaseModel):
    """Card details. Status and column change only through a move."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    priority: TaskPriority | None = None
    assigned_to_id: uuid.UUID | None = None
    due_date: datetime | None = None
    notes: str | None = None


class PostSaleTaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str | None = None
    type: TaskType
    priority: TaskPriority
    status: TaskStatus
    board_column: BoardColumn
    position: int
    customer_id: uuid.UUID | None = None
    policy_id: uuid.UUID | None = None
    assigned_to_id: uuid.UUID | None = None
    created_by_id: uuid.UUID
    due_date: datetime | None = None
    completed_at: datetime | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class BoardResponse(BaseModel):
    """Post-sale board, cards grouped by column in position order."""

    columns: dict[BoardColumn, list[PostSaleTaskResponse]]


class MoveTaskRequest(BaseModel):
    dest_column: BoardColumn
    dest_index: int = Field(ge=0)
