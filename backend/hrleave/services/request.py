# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import select, update
from sqlmodel import col

from hrleave.db import unit_of_work
from hrleave.exceptions import (
    ConcurrentModificationError,
    InsufficientBalanceError,
    InvalidTransitionError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from hrleave.models.base import now_utc
from hrleave.models.employee import Employee
from hrleave.models.enums import AuditAction, AuditEntityType, LeaveRequestStatus
from hrleave.models.leave_request import LeaveRequest
from hrleave.models.leave_type import LeaveType
from hrleave.schemas.request import LeaveRequestListResponse, LeaveRequestResponse
from hrleave.services.audit import model_to_audit_dict, write_audit_log
from hrleave.services.balance import adjust_balance, get_balance
from hrleave.services.employee import get_employee_or_404
from hrleave.services.leave_type import _get_leave_type_or_404
from hrleave.services.notification import send_notification
from hrleave.services.tenant import require_tenant

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

_DECISIONS = {
    LeaveRequestStatus.APPROVED: AuditAction.APPROVE,
    LeaveRequestStatus.REJECTED: AuditAction.REJECT,
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_request_response(
    request: LeaveRequest,
    employee_name: str | None = None,
    leave_type_name: str | None = None,
) -> LeaveRequestResponse:
    """Map a request model to its response schema."""
    return LeaveRequestResponse(
        id=request.id,
        tenant_id=request.tenant_id,
        employee_id=request.employee_id,
        employee_name=employee_name,
        leave_type_id=request.leave_type_id,
        leave_type_name=leave_type_name,
        start_date=request.start_date,
        end_date=request.end_date,
        requested_days=request.requested_days,
        reason=request.reason,
        status=LeaveRequestStatus(request.status),
        request_date=request.request_date,
        approver_id=request.approver_id,
        approval_date=request.approval_date,
        comments=request.comments,
    )


def _named_request_query() -> Any:
    """Select requests together with the employee and leave type names."""
    return (
        select(LeaveRequest, col(Employee.name), col(LeaveType.name))
        .outerjoin(Employee, col(Employee.id) == col(LeaveRequest.employee_id))
        .outerjoin(LeaveType, col(LeaveType.id) == col(LeaveRequest.leave_type_id))
        .execution_options(populate_existing=True)
    )


async def _get_request_or_404(
    session: AsyncSession,
    tenant_id: str,
    request_id: uuid.UUID,
) -> LeaveRequest:
    """Fetch a request by ID scoped to the tenant, always re-reading the row."""
    result = await session.execute(
        select(LeaveRequest)
        .where(
            col(LeaveRequest.id) == request_id,
            col(LeaveRequest.tenant_id) == tenant_id,
        )
        .execution_options(populate_existing=True)
    )
    request = result.scalar_one_or_none()
    if request is None:
        raise NotFoundError("Leave request not found")
    return request


async def _load_request_response(
    session: AsyncSession,
    tenant_id: str,
    request_id: uuid.UUID,
) -> LeaveRequestResponse:
    result = await session.execute(
        _named_request_query().where(
            col(LeaveRequest.id) == request_id,
            col(LeaveRequest.tenant_id) == tenant_id,
        )
    )
    row = result.one_or_none()
    if row is None:
        raise NotFoundError("Leave request not found")
    request, employee_name, leave_type_name = row
    return _build_request_response(request, employee_name, leave_type_name)


async def transition_pending_request(
    session: AsyncSession,
    tenant_id: str,
    request_id: uuid.UUID,
    **values: Any,
) -> None:
    """Move a request out of Pending with a single conditional UPDATE.

    The ``status = 'Pending'`` condition is the optimistic concurrency guard:
    if another transaction decided the request after it was read, no row
    matches and ConcurrentModificationError is raised.
    """
    result = await session.execute(
        update(LeaveRequest)
        .where(
            col(LeaveRequest.id) == request_id,
            col(LeaveRequest.tenant_id) == tenant_id,
            col(LeaveRequest.status) == LeaveRequestStatus.PENDING.value,
        )
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:  # type: ignore[attr-defined]
        logger.warning("Concurrent modification on leave request %s of tenant %s", request_id, tenant_id)
        raise ConcurrentModificationError("Leave request could not be updated (status might have changed).")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_leave_request(
    session: AsyncSession,
    tenant_id: str,
    *,
    employee_id: uuid.UUID,
    leave_type_id: uuid.UUID,
    start_date: date,
    end_date: date,
    reason: str,
    actor_id: uuid.UUID | None = None,
) -> LeaveRequestResponse:
    """Submit a leave request.

    Flow:
    1. Reject an end date before the start date.
    2. Look up the leave type and the employee.
    3. Compute inclusive requested days.
    4. For types requiring approval, the balance must cover the requested days.
    5. Insert as Pending, or as Approved when the type needs no approval.
    6. Auto-approved requests debit the balance in the same transaction.
    7. Audit log, commit, then notify.
    """
    tenant_id = require_tenant(tenant_id)
    if end_date < start_date:
        raise ValidationError("End date cannot be earlier than start date")

    async with unit_of_work(session):
        leave_type = await _get_leave_type_or_404(session, tenant_id, leave_type_id)
        employee = await get_employee_or_404(session, tenant_id, employee_id)

        requested_days = (end_date - start_date).days + 1

        if leave_type.requires_approval:
            balance = await get_balance(session, tenant_id, employee_id, leave_type_id)
            if balance < requested_days:
                raise InsufficientBalanceError(
                    f"Insufficient leave balance. Requested {requested_days} days, available {balance}."
                )

        auto_approved = not leave_type.requires_approval
        leave_request = LeaveRequest(
            tenant_id=tenant_id,
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=(LeaveRequestStatus.APPROVED if auto_approved else LeaveRequestStatus.PENDING).value,
            approval_date=now_utc() if auto_approved else None,
        )
        session.add(leave_request)
        await session.flush()

        if auto_approved:
            await adjust_balance(session, tenant_id, employee_id, leave_type_id, Decimal(-requested_days))

        await write_audit_log(
            session,
            tenant_id=tenant_id,
            actor_id=actor_id or employee_id,
            entity_type=AuditEntityType.LEAVE_REQUEST,
            entity_id=leave_request.id,
            action=AuditAction.CREATE,
            after_json=model_to_audit_dict(leave_request),
        )
        response = _build_request_response(leave_request, employee.name, leave_type.name)

    logger.info(
        "Leave request %s created for employee %s (%d days, %s)",
        response.id,
        employee_id,
        requested_days,
        response.status,
    )
    if auto_approved:
        await send_notification(
            tenant_id,
            "leave_request.approved",
            f"{employee.name}'s {leave_type.name} request was approved automatically.",
            request_id=response.id,
        )
    else:
        await send_notification(
            tenant_id,
            "leave_request.pending",
            f"{employee.name} requested {requested_days} days of {leave_type.name}.",
            request_id=response.id,
        )
    return response


async def set_request_status(
    session: AsyncSession,
    tenant_id: str,
    request_id: uuid.UUID,
    new_status: LeaveRequestStatus | str,
    *,
    approver_id: uuid.UUID,
    comments: str | None = None,
) -> LeaveRequestResponse:
    """Approve or reject a pending request.

    Flow:
    1. Only Approved or Rejected are accepted as decisions.
    2. Fetch the request; it must still be Pending.
    3. Conditional update guarded on Pending.
    4. Approval debits the balance by the days recomputed from the stored dates.
    5. Audit log, commit, then notify.
    """
    tenant_id = require_tenant(tenant_id)
    try:
        decision = LeaveRequestStatus(new_status)
    except ValueError:
        raise ValidationError(f"Invalid status: {new_status}") from None
    if decision not in _DECISIONS:
        raise ValidationError(f"Invalid status: {decision.value}")

    async with unit_of_work(session):
        leave_request = await _get_request_or_404(session, tenant_id, request_id)
        if leave_request.status != LeaveRequestStatus.PENDING.value:
            raise InvalidTransitionError(f"Leave request is already {leave_request.status}")

        before_dict = model_to_audit_dict(leave_request)
        await transition_pending_request(
            session,
            tenant_id,
            request_id,
            status=decision.value,
            approver_id=approver_id,
            approval_date=now_utc(),
            comments=comments,
        )

        if decision == LeaveRequestStatus.APPROVED:
            await adjust_balance(
                session,
                tenant_id,
                leave_request.employee_id,
                leave_request.leave_type_id,
                Decimal(-leave_request.requested_days),
            )

        response = await _load_request_response(session, tenant_id, request_id)
        await write_audit_log(
            session,
            tenant_id=tenant_id,
            actor_id=approver_id,
            entity_type=AuditEntityType.LEAVE_REQUEST,
            entity_id=request_id,
            action=_DECISIONS[decision],
            before_json=before_dict,
            after_json=response.model_dump(mode="json"),
        )

    logger.info("Leave request %s of tenant %s %s by %s", request_id, tenant_id, decision.value, approver_id)
    await send_notification(
        tenant_id,
        f"leave_request.{decision.value.lower()}",
        f"Leave request {request_id} was {decision.value.lower()}.",
        request_id=request_id,
        employee_id=response.employee_id,
    )
    return response


async def cancel_request(
    session: AsyncSession,
    tenant_id: str,
    request_id: uuid.UUID,
    *,
    caller_id: uuid.UUID,
) -> LeaveRequestResponse:
    """Cancel the caller's own pending request. Balances are not touched."""
    tenant_id = require_tenant(tenant_id)
    async with unit_of_work(session):
        leave_request = await _get_request_or_404(session, tenant_id, request_id)
        if leave_request.employee_id != caller_id:
            raise UnauthorizedError("You can only cancel your own leave requests.")
        if leave_request.status != LeaveRequestStatus.PENDING.value:
            raise InvalidTransitionError(f"Only pending requests can be cancelled (current: {leave_request.status})")

        before_dict = model_to_audit_dict(leave_request)
        await transition_pending_request(
            session,
            tenant_id,
            request_id,
            status=LeaveRequestStatus.CANCELLED.value,
            approval_date=now_utc(),
            comments=f"Cancelled by user {caller_id}.",
        )

        response = await _load_request_response(session, tenant_id, request_id)
        await write_audit_log(
            session,
            tenant_id=tenant_id,
            actor_id=caller_id,
            entity_type=AuditEntityType.LEAVE_REQUEST,
            entity_id=request_id,
            action=AuditAction.CANCEL,
            before_json=before_dict,
            after_json=response.model_dump(mode="json"),
        )

    logger.info("Leave request %s of tenant %s cancelled by %s", request_id, tenant_id, caller_id)
    await send_notification(
        tenant_id,
        "leave_request.cancelled",
        f"Leave request {request_id} was cancelled.",
        request_id=request_id,
    )
    return response


async def get_request(
    session: AsyncSession,
    tenant_id: str,
    request_id: uuid.UUID,
) -> LeaveRequestResponse:
    """Get a single request with employee and leave type names."""
    tenant_id = require_tenant(tenant_id)
    return await _load_request_response(session, tenant_id, request_id)


async def list_requests(
    session: AsyncSession,
    tenant_id: str,
    *,
    employee_id: uuid.UUID | None = None,
    status: LeaveRequestStatus | None = None,
) -> LeaveRequestListResponse:
    """List requests of the tenant, newest first."""
    tenant_id = require_tenant(tenant_id)
    query = _named_request_query().where(col(LeaveRequest.tenant_id) == tenant_id)
    if employee_id is not None:
        query = query.where(col(LeaveRequest.employee_id) == employee_id)
    if status is not None:
        query = query.where(col(LeaveRequest.status) == status.value)
    result = await session.execute(query.order_by(col(LeaveRequest.request_date).desc()))
    items = [_build_request_response(request, employee_name, type_name) for request, employee_name, type_name in result]
    return LeaveRequestListResponse(items=items, total=len(items))
