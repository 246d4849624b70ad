# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

from pydantic import BaseModel, Field


class CreateHolidayRequest(BaseModel):
    """Request body for creating a tenant holiday."""

    date: datetime.date
    name: str = Field(min_length=3, max_length=255)
    description: str | None = Field(default=None, max_length=1000)


class UpdateHolidayRequest(BaseModel):
    """Partial update of a holiday; omitted fields are left unchanged."""

    date: datetime.date | None = None
    name: str | None = Field(default=None, min_length=3, max_length=255)
    description: str | None = Field(default=None, max_length=1000)


class HolidayResponse(BaseModel):
    """Response schema for a tenant holiday."""

    id: uuid.UUID
    tenant_id: str
    date: datetime.date
    name: str
    description: str | None


class HolidayListResponse(BaseModel):
    """List of tenant holidays."""

    items: list[HolidayResponse]
    total: int
