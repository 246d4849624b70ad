from __future__ import annotations

from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from hrleave.models.base import TenantMixin, TimestampMixin, UUIDBase


class LeaveType(UUIDBase, TenantMixin, TimestampMixin, table=True):
    """A category of leave (Annual, Sick, ...) with its balance policy."""

    __tablename__ = "leave_type"
    __table_args__ = (sa.UniqueConstraint("tenant_id", "name", name="uq_leave_type_tenant_name"),)

    name: str = Field(max_length=100)
    description: str | None = None
    requires_approval: bool = Field(default=True, sa_column_kwargs={"server_default": sa.true()})
    default_balance: Decimal = Field(
        default=Decimal(0), max_digits=7, decimal_places=2, sa_column_kwargs={"server_default": "0"}
    )
    accrual_rate: Decimal = Field(
        default=Decimal(0), max_digits=7, decimal_places=2, sa_column_kwargs={"server_default": "0"}
    )
