# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator


def _strip_name(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    if not stripped:
        msg = "Leave type name is required"
        raise ValueError(msg)
    return stripped


class CreateLeaveTypeRequest(BaseModel):
    """Request body for creating a leave type."""

    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    requires_approval: bool = True
    default_balance: Decimal = Field(default=Decimal(0), ge=0, max_digits=7, decimal_places=2)
    accrual_rate: Decimal = Field(default=Decimal(0), ge=0, max_digits=7, decimal_places=2)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str | None) -> str | None:
        return _strip_name(value)


class UpdateLeaveTypeRequest(BaseModel):
    """Partial update of a leave type; only fields that are set are written."""

    name: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    requires_approval: bool | None = None
    default_balance: Decimal | None = Field(default=None, ge=0, max_digits=7, decimal_places=2)
    accrual_rate: Decimal | None = Field(default=None, ge=0, max_digits=7, decimal_places=2)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str | None) -> str | None:
        return _strip_name(value)


class LeaveTypeResponse(BaseModel):
    """Response schema for a leave type."""

    id: uuid.UUID
    tenant_id: str
    name: str
    description: str | None
    requires_approval: bool
    default_balance: Decimal
    accrual_rate: Decimal
    created_at: datetime


class LeaveTypeListResponse(BaseModel):
    """All leave types of a tenant, ordered by name."""

    items: list[LeaveTypeResponse]
    total: int
