# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Literal, Self

from pydantic import BaseModel, Field, model_validator

from hrleave.models.enums import LeaveRequestStatus

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class CreateLeaveRequestPayload(BaseModel):
    """Request body for submitting a leave request.

    ``employee_id`` defaults to the caller; only admins may file for someone else.
    """

    employee_id: uuid.UUID | None = None
    leave_type_id: uuid.UUID
    start_date: date
    end_date: date
    reason: str = Field(min_length=5, max_length=200)

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.end_date < self.start_date:
            msg = "End date cannot be earlier than start date"
            raise ValueError(msg)
        return self


class StatusUpdatePayload(BaseModel):
    """Request body for approving or rejecting a request."""

    status: Literal["Approved", "Rejected"]
    comments: str | None = Field(default=None, max_length=1000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LeaveRequestResponse(BaseModel):
    """Response schema for a single leave request."""

    id: uuid.UUID
    tenant_id: str
    employee_id: uuid.UUID
    employee_name: str | None
    leave_type_id: uuid.UUID
    leave_type_name: str | None
    start_date: date
    end_date: date
    requested_days: int
    reason: str
    status: LeaveRequestStatus
    request_date: datetime
    approver_id: uuid.UUID | None
    approval_date: datetime | None
    comments: str | None


class LeaveRequestListResponse(BaseModel):
    """Leave requests, newest first."""

    items: list[LeaveRequestResponse]
    total: int
