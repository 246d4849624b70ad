# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from hrleave.api.deps import AdminDep, AuthDep
from hrleave.db import SessionDep
from hrleave.schemas.leave_type import (
    CreateLeaveTypeRequest,
    LeaveTypeListResponse,
    LeaveTypeResponse,
    UpdateLeaveTypeRequest,
)
from hrleave.services import leave_type as leave_type_service

leave_types_router = APIRouter(prefix="/leave/types", tags=["leave types"])


@leave_types_router.get("", response_model=LeaveTypeListResponse)
async def list_leave_types(session: SessionDep, auth: AuthDep) -> LeaveTypeListResponse:
    """List the tenant's leave types."""
    return await leave_type_service.list_leave_types(session, auth.tenant_id)


@leave_types_router.post("", response_model=LeaveTypeResponse, status_code=201)
async def create_leave_type(
    payload: CreateLeaveTypeRequest,
    session: SessionDep,
    auth: AdminDep,
) -> LeaveTypeResponse:
    """Create a leave type and initialize balances for existing employees (admin only)."""
    return await leave_type_service.create_leave_type(session, auth.tenant_id, payload, actor_id=auth.user_id)


@leave_types_router.get("/{leave_type_id}", response_model=LeaveTypeResponse)
async def get_leave_type(
    leave_type_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveTypeResponse:
    return await leave_type_service.get_leave_type(session, auth.tenant_id, leave_type_id)


@leave_types_router.patch("/{leave_type_id}", response_model=LeaveTypeResponse)
async def update_leave_type(
    leave_type_id: uuid.UUID,
    payload: UpdateLeaveTypeRequest,
    session: SessionDep,
    auth: AdminDep,
) -> LeaveTypeResponse:
    """Partially update a leave type (admin only)."""
    return await leave_type_service.update_leave_type(
        session, auth.tenant_id, leave_type_id, payload, actor_id=auth.user_id
    )


@leave_types_router.delete("/{leave_type_id}", status_code=204)
async def delete_leave_type(
    leave_type_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Delete an unused leave type (admin only)."""
    await leave_type_service.delete_leave_type(session, auth.tenant_id, leave_type_id, actor_id=auth.user_id)
