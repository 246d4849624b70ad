# ruff: noqa: TC003
"""Leave balance ledger: lazy row initialization, reads, and atomic adjustment."""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from hrleave.db import unit_of_work, upsert_insert
from hrleave.exceptions import BalanceLedgerError, NotFoundError
from hrleave.models.base import now_utc
from hrleave.models.employee import Employee
from hrleave.models.leave_balance import LeaveBalance
from hrleave.models.leave_type import LeaveType
from hrleave.schemas.balance import BalanceListResponse, BalanceResponse
from hrleave.services.tenant import require_tenant

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

_BALANCE_KEY = ["tenant_id", "employee_id", "leave_type_id"]


# ---------------------------------------------------------------------------
# Row initialization
# ---------------------------------------------------------------------------


async def _insert_missing_rows(session: AsyncSession, rows: list[dict[str, object]]) -> None:
    """Insert balance rows, leaving any row that already exists untouched."""
    if not rows:
        return
    stmt = upsert_insert(session, LeaveBalance).values(rows).on_conflict_do_nothing(index_elements=_BALANCE_KEY)
    try:
        await session.execute(stmt)
    except IntegrityError:
        # Unique conflicts are ignored by the statement; what is left is a dangling employee or type.
        raise NotFoundError("Employee or leave type not found") from None


async def ensure_balance_rows(
    session: AsyncSession,
    tenant_id: str,
    employee_id: uuid.UUID,
) -> None:
    """Make sure the employee has a balance row for every leave type of the tenant.

    Missing rows start at the type's ``default_balance``. An employee of another
    tenant is reported as not found. Runs inside the caller's transaction and is
    safe to call any number of times.
    """
    tenant_id = require_tenant(tenant_id)
    owner = await session.execute(
        select(col(Employee.id)).where(col(Employee.tenant_id) == tenant_id, col(Employee.id) == employee_id)
    )
    if owner.first() is None:
        raise NotFoundError("Employee not found")
    result = await session.execute(
        select(col(LeaveType.id), col(LeaveType.default_balance)).where(col(LeaveType.tenant_id) == tenant_id)
    )
    now = now_utc()
    rows: list[dict[str, object]] = [
        {
            "tenant_id": tenant_id,
            "employee_id": employee_id,
            "leave_type_id": type_id,
            "balance": default_balance,
            "last_updated": now,
        }
        for type_id, default_balance in result.all()
    ]
    await _insert_missing_rows(session, rows)


async def initialize_balances_for_type(
    session: AsyncSession,
    tenant_id: str,
    leave_type_id: uuid.UUID,
    default_balance: Decimal,
) -> int:
    """Give every employee of the tenant a row for a newly created leave type.

    Returns the number of employees covered. Runs inside the caller's transaction,
    so a failure here fails the type creation as a whole.
    """
    result = await session.execute(select(col(Employee.id)).where(col(Employee.tenant_id) == tenant_id))
    employee_ids = list(result.scalars().all())
    now = now_utc()
    await _insert_missing_rows(
        session,
        [
            {
                "tenant_id": tenant_id,
                "employee_id": employee_id,
                "leave_type_id": leave_type_id,
                "balance": default_balance,
                "last_updated": now,
            }
            for employee_id in employee_ids
        ],
    )
    logger.info("Initialized balances for leave type %s across %d employees", leave_type_id, len(employee_ids))
    return len(employee_ids)


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def get_balance(
    session: AsyncSession,
    tenant_id: str,
    employee_id: uuid.UUID,
    leave_type_id: uuid.UUID,
) -> Decimal:
    """Return one balance, creating the row first if needed.

    Does not commit: the request workflow reads the balance inside its own transaction.
    """
    tenant_id = require_tenant(tenant_id)
    await ensure_balance_rows(session, tenant_id, employee_id)
    result = await session.execute(
        select(col(LeaveBalance.balance)).where(
            col(LeaveBalance.tenant_id) == tenant_id,
            col(LeaveBalance.employee_id) == employee_id,
            col(LeaveBalance.leave_type_id) == leave_type_id,
        )
    )
    balance = result.scalar_one_or_none()
    if balance is None:
        raise NotFoundError("Leave type not found")
    return balance


async def get_balances(
    session: AsyncSession,
    tenant_id: str,
    employee_id: uuid.UUID,
) -> BalanceListResponse:
    """Return every balance of an employee, ordered by leave type name."""
    tenant_id = require_tenant(tenant_id)
    async with unit_of_work(session):
        await ensure_balance_rows(session, tenant_id, employee_id)
        result = await session.execute(
            select(
                col(LeaveBalance.employee_id),
                col(LeaveBalance.leave_type_id),
                col(LeaveType.name),
                col(LeaveBalance.balance),
                col(LeaveBalance.last_updated),
            )
            .join(LeaveType, col(LeaveType.id) == col(LeaveBalance.leave_type_id))
            .where(
                col(LeaveBalance.tenant_id) == tenant_id,
                col(LeaveBalance.employee_id) == employee_id,
            )
            .order_by(col(LeaveType.name))
        )
        items = [
            BalanceResponse(
                employee_id=row.employee_id,
                leave_type_id=row.leave_type_id,
                leave_type_name=row.name,
                balance=row.balance,
                last_updated=row.last_updated,
            )
            for row in result.all()
        ]
    return BalanceListResponse(items=items, total=len(items))


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------


async def adjust_balance(
    session: AsyncSession,
    tenant_id: str,
    employee_id: uuid.UUID,
    leave_type_id: uuid.UUID,
    delta: Decimal,
) -> None:
    """Add ``delta`` (positive or negative) to a balance inside the caller's transaction.

    The increment is a single ``UPDATE ... SET balance = balance + :delta`` so
    concurrent adjustments serialize on the row lock instead of losing updates.
    No floor is applied; callers check sufficiency before debiting.
    """
    stmt = (
        update(LeaveBalance)
        .where(
            col(LeaveBalance.tenant_id) == tenant_id,
            col(LeaveBalance.employee_id) == employee_id,
            col(LeaveBalance.leave_type_id) == leave_type_id,
        )
        .values(balance=col(LeaveBalance.balance) + delta, last_updated=now_utc())
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)
    if result.rowcount == 0:  # type: ignore[attr-defined]
        logger.warning(
            "Balance row missing for employee=%s leave_type=%s during adjustment; initializing",
            employee_id,
            leave_type_id,
        )
        await ensure_balance_rows(session, tenant_id, employee_id)
        result = await session.execute(stmt)
        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise BalanceLedgerError(
                f"Failed to adjust balance for employee {employee_id}, leave type {leave_type_id} "
                "even after initialization"
            )
    logger.info("Adjusted balance employee=%s leave_type=%s by %s", employee_id, leave_type_id, delta)
