# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

import sqlalchemy as sa
from sqlmodel import Field

from hrleave.models.base import TenantMixin, UUIDBase, now_utc
from hrleave.models.enums import LeaveRequestStatus


class LeaveRequest(UUIDBase, TenantMixin, table=True):
    """An employee's leave request with approval workflow state."""

    __tablename__ = "leave_request"
    __table_args__ = (
        sa.Index("ix_leave_request_tenant_status", "tenant_id", "status"),
        sa.CheckConstraint("end_date >= start_date", name="ck_leave_request_dates"),
    )

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    leave_type_id: uuid.UUID = Field(
        sa_column=sa.Column(
            sa.Uuid, sa.ForeignKey("leave_type.id", ondelete="RESTRICT"), nullable=False, index=True
        ),
    )
    start_date: date
    end_date: date
    reason: str = Field(max_length=200)
    status: str = Field(
        default=LeaveRequestStatus.PENDING, max_length=20, sa_column_kwargs={"server_default": "Pending"}
    )
    request_date: datetime = Field(
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    approver_id: uuid.UUID | None = None
    approval_date: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    comments: str | None = None

    @property
    def requested_days(self) -> int:
        """Inclusive calendar-day span; holidays and weekends are not excluded."""
        return (self.end_date - self.start_date).days + 1
