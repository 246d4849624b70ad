from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel


class AccrualRunResponse(BaseModel):
    """Summary of one accrual sweep for a tenant."""

    tenant_id: str
    employees: int
    leave_types: int
    updated: int
    total_accrued: Decimal
