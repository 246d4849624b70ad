"""Accrual sweep: credit every active employee with each accruing leave type's rate."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from hrleave.db import unit_of_work
from hrleave.models.employee import Employee
from hrleave.models.enums import AuditAction, AuditEntityType, EmployeeStatus
from hrleave.models.leave_type import LeaveType
from hrleave.services.audit import SYSTEM_ACTOR_ID, write_audit_log
from hrleave.services.balance import adjust_balance, ensure_balance_rows
from hrleave.services.notification import send_notification
from hrleave.services.tenant import require_tenant

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------


@dataclass
class AccrualRunResult:
    """Summary of one tenant's accrual run."""

    tenant_id: str
    employees: int = 0
    leave_types: int = 0
    updated: int = 0
    total_accrued: Decimal = Decimal(0)


@dataclass
class AccrualBatchResult:
    """Summary of a sweep over every tenant."""

    runs: list[AccrualRunResult] = field(default_factory=list)
    errors: int = 0
    failed_tenants: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Sweep
# ---------------------------------------------------------------------------


async def run_monthly_accrual(
    session: AsyncSession,
    tenant_id: str,
    *,
    actor_id: uuid.UUID = SYSTEM_ACTOR_ID,
) -> AccrualRunResult:
    """Add each accruing type's rate to every Active employee's balance.

    The whole tenant runs in one transaction. There is no period guard:
    calling this twice in a month accrues twice.
    """
    tenant_id = require_tenant(tenant_id)
    result = AccrualRunResult(tenant_id=tenant_id)

    async with unit_of_work(session):
        employees = await session.execute(
            select(col(Employee.id)).where(
                col(Employee.tenant_id) == tenant_id,
                col(Employee.status) == EmployeeStatus.ACTIVE.value,
            )
        )
        employee_ids = list(employees.scalars().all())
        accruing = await session.execute(
            select(col(LeaveType.id), col(LeaveType.accrual_rate)).where(
                col(LeaveType.tenant_id) == tenant_id,
                col(LeaveType.accrual_rate) > 0,
            )
        )
        rates = [(type_id, rate) for type_id, rate in accruing.all()]
        result.employees = len(employee_ids)
        result.leave_types = len(rates)

        if not employee_ids or not rates:
            logger.info("Nothing to accrue for tenant %s", tenant_id)
            return result

        for employee_id in employee_ids:
            await ensure_balance_rows(session, tenant_id, employee_id)
            for leave_type_id, rate in rates:
                await adjust_balance(session, tenant_id, employee_id, leave_type_id, rate)
                result.updated += 1
                result.total_accrued += rate

        await write_audit_log(
            session,
            tenant_id=tenant_id,
            actor_id=actor_id,
            entity_type=AuditEntityType.ACCRUAL,
            entity_id=uuid.uuid4(),
            action=AuditAction.ACCRUE,
            after_json={
                "employees": result.employees,
                "leave_types": result.leave_types,
                "updated": result.updated,
                "total_accrued": str(result.total_accrued),
            },
        )

    logger.info(
        "Accrual run complete for tenant %s: employees=%d types=%d updated=%d",
        tenant_id,
        result.employees,
        result.leave_types,
        result.updated,
    )
    await send_notification(
        tenant_id,
        "accrual.completed",
        f"Monthly accrual credited {result.updated} balances.",
        updated=result.updated,
        total_accrued=str(result.total_accrued),
    )
    return result


async def _tenants_with_accruing_types(session: AsyncSession) -> list[str]:
    result = await session.execute(
        select(col(LeaveType.tenant_id))
        .where(col(LeaveType.accrual_rate) > 0)
        .distinct()
        .order_by(col(LeaveType.tenant_id))
    )
    return list(result.scalars().all())


async def run_accrual_for_all_tenants(
    session_factory: async_sessionmaker[AsyncSession],
) -> AccrualBatchResult:
    """Run the accrual for every tenant that has an accruing leave type.

    Each tenant gets its own session and transaction; a failing tenant is
    logged and counted and does not stop the others.
    """
    async with session_factory() as session:
        tenants = await _tenants_with_accruing_types(session)

    batch = AccrualBatchResult()
    for tenant_id in tenants:
        try:
            async with session_factory() as session:
                batch.runs.append(await run_monthly_accrual(session, tenant_id))
        except Exception:
            logger.exception("Accrual run failed for tenant %s", tenant_id)
            batch.errors += 1
            batch.failed_tenants.append(tenant_id)

    logger.info("Accrual sweep finished: tenants=%d errors=%d", len(tenants), batch.errors)
    return batch
