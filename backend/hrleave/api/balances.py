# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from hrleave.api.deps import AuthDep
from hrleave.db import SessionDep
from hrleave.exceptions import UnauthorizedError
from hrleave.schemas.balance import BalanceListResponse
from hrleave.services import balance as balance_service

balances_router = APIRouter(prefix="/leave/balances", tags=["balances"])


@balances_router.get("/{employee_id}", response_model=BalanceListResponse)
async def get_employee_balances(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> BalanceListResponse:
    """Get every leave balance of an employee. Employees may only read their own."""
    if not auth.is_admin and employee_id != auth.user_id:
        raise UnauthorizedError("You can only view your own balances.")
    return await balance_service.get_balances(session, auth.tenant_id, employee_id)
