# This project was developed with assistance from AI tools.
"""Processing queue schemas."""

import uuid

from db.enums import PolicyStatus
from pydantic import BaseModel, Field

from . import Pagination
from .policy import PolicyResponse


class ProcessingQueueResponse(BaseModel):
    data: list[PolicyResponse]
    pagination: Pagination


class AssignProcessorRequest(BaseModel):
    processor_id: uuid.UUID


class MissingDocsRequest(BaseModel):
    notes: str = Field(min_length=1, max_length=2000)


class ProcessingStatusUpdate(BaseModel):
    status: PolicyStatus
    notes: str | None = Field(default=None, max_length=2000)


class ProcessingStats(BaseModel):
    total: int
    needing_attention: int
    by_status: dict[str, int]


class ProcessorSummary(BaseModel):
    id: uuid.UUID
    name: str
    email: str
