# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from hrleave.models.base import now_utc


class LeaveBalance(SQLModel, table=True):
    """Running balance for one (tenant, employee, leave type).

    Written only through the ledger's atomic adjustment; never assigned directly
    after the row is initialized at the type's default balance.
    """

    __tablename__ = "leave_balance"
    __table_args__ = (sa.PrimaryKeyConstraint("tenant_id", "employee_id", "leave_type_id"),)

    tenant_id: str = Field(max_length=255)
    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    leave_type_id: uuid.UUID = Field(
        sa_column=sa.Column(
            sa.Uuid, sa.ForeignKey("leave_type.id", ondelete="RESTRICT"), nullable=False, index=True
        ),
    )
    balance: Decimal = Field(default=Decimal(0), max_digits=7, decimal_places=2)
    last_updated: datetime = Field(
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
