# ruff: noqa: TC003
from __future__ import annotations

import datetime

import sqlalchemy as sa
from sqlmodel import Field

from hrleave.models.base import TenantMixin, TimestampMixin, UUIDBase


class Holiday(UUIDBase, TenantMixin, TimestampMixin, table=True):
    """A tenant holiday. Listed for reference; leave day counts do not exclude it."""

    __tablename__ = "holiday"
    __table_args__ = (sa.UniqueConstraint("tenant_id", "date", name="uq_holiday_tenant_date"),)

    date: datetime.date
    name: str = Field(max_length=255)
    description: str | None = None
