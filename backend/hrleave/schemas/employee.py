# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from hrleave.models.enums import EmployeeStatus


class CreateEmployeeRequest(BaseModel):
    """Request body for registering an employee."""

    id: uuid.UUID | None = None
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    status: EmployeeStatus = EmployeeStatus.ACTIVE


class UpdateEmployeeStatusRequest(BaseModel):
    """Request body for changing an employee's status."""

    status: EmployeeStatus


class EmployeeResponse(BaseModel):
    """Response schema for an employee."""

    id: uuid.UUID
    tenant_id: str
    name: str
    email: str
    status: EmployeeStatus
    created_at: datetime


class EmployeeListResponse(BaseModel):
    """List of employees."""

    items: list[EmployeeResponse]
    total: int
