from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from hrleave.db import unit_of_work
from hrleave.exceptions import InUseError, NotFoundError, ValidationError
from hrleave.models.enums import AuditAction, AuditEntityType
from hrleave.models.leave_balance import LeaveBalance
from hrleave.models.leave_request import LeaveRequest
from hrleave.models.leave_type import LeaveType
from hrleave.schemas.leave_type import LeaveTypeListResponse, LeaveTypeResponse
from hrleave.services.audit import model_to_audit_dict, write_audit_log
from hrleave.services.balance import initialize_balances_for_type
from hrleave.services.tenant import require_tenant

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from hrleave.schemas.leave_type import CreateLeaveTypeRequest, UpdateLeaveTypeRequest

logger = logging.getLogger(__name__)

# Columns that may not be cleared through a partial update.
_NON_NULLABLE_FIELDS = {"name", "requires_approval", "default_balance", "accrual_rate"}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_leave_type_response(leave_type: LeaveType) -> LeaveTypeResponse:
    return LeaveTypeResponse(
        id=leave_type.id,
        tenant_id=leave_type.tenant_id,
        name=leave_type.name,
        description=leave_type.description,
        requires_approval=leave_type.requires_approval,
        default_balance=leave_type.default_balance,
        accrual_rate=leave_type.accrual_rate,
        created_at=leave_type.created_at,
    )


async def _get_leave_type_or_404(
    session: AsyncSession,
    tenant_id: str,
    leave_type_id: uuid.UUID,
) -> LeaveType:
    result = await session.execute(
        select(LeaveType).where(
            col(LeaveType.id) == leave_type_id,
            col(LeaveType.tenant_id) == tenant_id,
        )
    )
    leave_type = result.scalar_one_or_none()
    if leave_type is None:
        raise NotFoundError("Leave type not found")
    return leave_type


async def _ensure_name_available(
    session: AsyncSession,
    tenant_id: str,
    name: str,
    exclude_id: uuid.UUID | None = None,
) -> None:
    query = select(col(LeaveType.id)).where(col(LeaveType.tenant_id) == tenant_id, col(LeaveType.name) == name)
    if exclude_id is not None:
        query = query.where(col(LeaveType.id) != exclude_id)
    result = await session.execute(query)
    if result.first() is not None:
        raise ValidationError(f"Leave type '{name}' already exists", status_code=409)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def list_leave_types(session: AsyncSession, tenant_id: str) -> LeaveTypeListResponse:
    """List the tenant's leave types ordered by name."""
    tenant_id = require_tenant(tenant_id)
    result = await session.execute(
        select(LeaveType).where(col(LeaveType.tenant_id) == tenant_id).order_by(col(LeaveType.name))
    )
    items = [_build_leave_type_response(t) for t in result.scalars().all()]
    return LeaveTypeListResponse(items=items, total=len(items))


async def get_leave_type(
    session: AsyncSession,
    tenant_id: str,
    leave_type_id: uuid.UUID,
) -> LeaveTypeResponse:
    """Get a single leave type or raise NotFoundError."""
    tenant_id = require_tenant(tenant_id)
    return _build_leave_type_response(await _get_leave_type_or_404(session, tenant_id, leave_type_id))


async def create_leave_type(
    session: AsyncSession,
    tenant_id: str,
    payload: CreateLeaveTypeRequest,
    *,
    actor_id: uuid.UUID,
) -> LeaveTypeResponse:
    """Create a leave type and give every existing employee a balance row for it.

    Flow:
    1. Reject a name already used in the tenant.
    2. Insert the type.
    3. Insert one balance row per employee at ``default_balance`` (existing rows untouched).
    4. Audit log.
    5. Commit; any failure rolls back the type together with its balance rows.
    """
    tenant_id = require_tenant(tenant_id)
    async with unit_of_work(session):
        await _ensure_name_available(session, tenant_id, payload.name)

        leave_type = LeaveType(
            tenant_id=tenant_id,
            name=payload.name,
            description=payload.description,
            requires_approval=payload.requires_approval,
            default_balance=payload.default_balance,
            accrual_rate=payload.accrual_rate,
        )
        session.add(leave_type)
        await session.flush()

        employees = await initialize_balances_for_type(session, tenant_id, leave_type.id, leave_type.default_balance)

        await write_audit_log(
            session,
            tenant_id=tenant_id,
            actor_id=actor_id,
            entity_type=AuditEntityType.LEAVE_TYPE,
            entity_id=leave_type.id,
            action=AuditAction.CREATE,
            after_json=model_to_audit_dict(leave_type),
        )
        response = _build_leave_type_response(leave_type)

    logger.info(
        "Created leave type %s (%s) for tenant %s with %d balances",
        leave_type.id,
        payload.name,
        tenant_id,
        employees,
    )
    return response


async def update_leave_type(
    session: AsyncSession,
    tenant_id: str,
    leave_type_id: uuid.UUID,
    payload: UpdateLeaveTypeRequest,
    *,
    actor_id: uuid.UUID,
) -> LeaveTypeResponse:
    """Apply a partial update. Existing balances are not touched by a new default_balance."""
    tenant_id = require_tenant(tenant_id)
    async with unit_of_work(session):
        leave_type = await _get_leave_type_or_404(session, tenant_id, leave_type_id)

        updates = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key not in _NON_NULLABLE_FIELDS
        }
        if not updates:
            return _build_leave_type_response(leave_type)

        if "name" in updates and updates["name"] != leave_type.name:
            await _ensure_name_available(session, tenant_id, updates["name"], exclude_id=leave_type.id)

        before_dict = model_to_audit_dict(leave_type)
        for key, value in updates.items():
            setattr(leave_type, key, value)
        session.add(leave_type)
        await session.flush()

        await write_audit_log(
            session,
            tenant_id=tenant_id,
            actor_id=actor_id,
            entity_type=AuditEntityType.LEAVE_TYPE,
            entity_id=leave_type.id,
            action=AuditAction.UPDATE,
            before_json=before_dict,
            after_json=model_to_audit_dict(leave_type),
        )
        response = _build_leave_type_response(leave_type)

    logger.info("Updated leave type %s for tenant %s: %s", leave_type_id, tenant_id, sorted(updates))
    return response


async def delete_leave_type(
    session: AsyncSession,
    tenant_id: str,
    leave_type_id: uuid.UUID,
    *,
    actor_id: uuid.UUID,
) -> bool:
    """Delete a leave type that no request and no balance row references.

    Raises InUseError otherwise and leaves everything untouched.
    """
    tenant_id = require_tenant(tenant_id)
    async with unit_of_work(session):
        leave_type = await _get_leave_type_or_404(session, tenant_id, leave_type_id)

        used_in_requests = await session.execute(
            select(col(LeaveRequest.id))
            .where(col(LeaveRequest.tenant_id) == tenant_id, col(LeaveRequest.leave_type_id) == leave_type_id)
            .limit(1)
        )
        if used_in_requests.first() is not None:
            raise InUseError("Leave type is referenced by leave requests and cannot be deleted")

        used_in_balances = await session.execute(
            select(col(LeaveBalance.employee_id))
            .where(col(LeaveBalance.tenant_id) == tenant_id, col(LeaveBalance.leave_type_id) == leave_type_id)
            .limit(1)
        )
        if used_in_balances.first() is not None:
            raise InUseError("Leave type is referenced by leave balances and cannot be deleted")

        await write_audit_log(
            session,
            tenant_id=tenant_id,
            actor_id=actor_id,
            entity_type=AuditEntityType.LEAVE_TYPE,
            entity_id=leave_type.id,
            action=AuditAction.DELETE,
            before_json=model_to_audit_dict(leave_type),
        )
        await session.delete(leave_type)

    logger.info("Deleted leave type %s for tenant %s", leave_type_id, tenant_id)
    return True
