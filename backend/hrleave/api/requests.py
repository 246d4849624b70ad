# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from hrleave.api.deps import AdminDep, AuthDep
from hrleave.db import SessionDep
from hrleave.exceptions import UnauthorizedError
from hrleave.models.enums import LeaveRequestStatus
from hrleave.schemas.request import (
    CreateLeaveRequestPayload,
    LeaveRequestListResponse,
    LeaveRequestResponse,
    StatusUpdatePayload,
)
from hrleave.services import request as request_service

requests_router = APIRouter(prefix="/leave/requests", tags=["requests"])


@requests_router.post("", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_request(
    payload: CreateLeaveRequestPayload,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Submit a leave request for the caller, or for anyone when the caller is an admin."""
    employee_id = payload.employee_id or auth.user_id
    if employee_id != auth.user_id and not auth.is_admin:
        raise UnauthorizedError("Only administrators can file requests for other employees.")
    return await request_service.create_leave_request(
        session,
        auth.tenant_id,
        employee_id=employee_id,
        leave_type_id=payload.leave_type_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
        actor_id=auth.user_id,
    )


@requests_router.get("", response_model=LeaveRequestListResponse)
async def list_requests(
    session: SessionDep,
    auth: AuthDep,
    status_filter: LeaveRequestStatus | None = Query(default=None, alias="status"),
    employee_id: uuid.UUID | None = Query(default=None),
) -> LeaveRequestListResponse:
    """List leave requests. Employees only see their own."""
    if not auth.is_admin:
        if employee_id is not None and employee_id != auth.user_id:
            raise UnauthorizedError("You can only view your own leave requests.")
        employee_id = auth.user_id
    return await request_service.list_requests(
        session, auth.tenant_id, employee_id=employee_id, status=status_filter
    )


@requests_router.get("/{request_id}", response_model=LeaveRequestResponse)
async def get_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    response = await request_service.get_request(session, auth.tenant_id, request_id)
    if not auth.is_admin and response.employee_id != auth.user_id:
        raise UnauthorizedError("You can only view your own leave requests.")
    return response


@requests_router.post("/{request_id}/status", response_model=LeaveRequestResponse)
async def set_request_status(
    request_id: uuid.UUID,
    payload: StatusUpdatePayload,
    session: SessionDep,
    auth: AdminDep,
) -> LeaveRequestResponse:
    """Approve or reject a pending request (admin only)."""
    return await request_service.set_request_status(
        session,
        auth.tenant_id,
        request_id,
        payload.status,
        approver_id=auth.user_id,
        comments=payload.comments,
    )


@requests_router.post("/{request_id}/cancel", response_model=LeaveRequestResponse)
async def cancel_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Cancel the caller's own pending request."""
    return await request_service.cancel_request(session, auth.tenant_id, request_id, caller_id=auth.user_id)
