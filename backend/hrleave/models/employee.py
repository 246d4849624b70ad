from __future__ import annotations

from sqlmodel import Field

from hrleave.models.base import TenantMixin, TimestampMixin, UUIDBase
from hrleave.models.enums import EmployeeStatus


class Employee(UUIDBase, TenantMixin, TimestampMixin, table=True):
    """Minimal employee record that leave balances and requests hang off."""

    __tablename__ = "employee"

    name: str = Field(max_length=255)
    email: str = Field(max_length=255)
    status: str = Field(default=EmployeeStatus.ACTIVE, max_length=20, sa_column_kwargs={"server_default": "Active"})
