"""Admin trigger for the monthly accrual sweep."""

from __future__ import annotations

from fastapi import APIRouter

from hrleave.api.deps import AdminDep
from hrleave.db import SessionDep
from hrleave.schemas.accrual import AccrualRunResponse
from hrleave.services.accrual import run_monthly_accrual

accruals_router = APIRouter(prefix="/leave/accruals", tags=["accruals"])


@accruals_router.post("/run", response_model=AccrualRunResponse)
async def run_accrual(
    session: SessionDep,
    auth: AdminDep,
) -> AccrualRunResponse:
    """Run the monthly accrual for the caller's tenant (admin only).

    There is no period guard; every call credits the accrual rate again.
    """
    result = await run_monthly_accrual(session, auth.tenant_id, actor_id=auth.user_id)
    return AccrualRunResponse(
        tenant_id=result.tenant_id,
        employees=result.employees,
        leave_types=result.leave_types,
        updated=result.updated,
        total_accrued=result.total_accrued,
    )
