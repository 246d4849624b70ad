# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class BalanceResponse(BaseModel):
    """Balance of one leave type for one employee, in days."""

    employee_id: uuid.UUID
    leave_type_id: uuid.UUID
    leave_type_name: str
    balance: Decimal
    last_updated: datetime


class BalanceListResponse(BaseModel):
    """All leave balances for an employee, ordered by leave type name."""

    items: list[BalanceResponse]
    total: int
