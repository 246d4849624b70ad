# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from hrleave.api.deps import AdminDep, AuthDep
from hrleave.db import SessionDep
from hrleave.exceptions import UnauthorizedError
from hrleave.models.enums import EmployeeStatus
from hrleave.schemas.employee import (
    CreateEmployeeRequest,
    EmployeeListResponse,
    EmployeeResponse,
    UpdateEmployeeStatusRequest,
)
from hrleave.services import employee as employee_service

employees_router = APIRouter(prefix="/employees", tags=["employees"])


@employees_router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: CreateEmployeeRequest,
    session: SessionDep,
    auth: AdminDep,
) -> EmployeeResponse:
    """Register an employee and open their leave balances (admin only)."""
    return await employee_service.create_employee(session, auth.tenant_id, payload, actor_id=auth.user_id)


@employees_router.get("", response_model=EmployeeListResponse)
async def list_employees(
    session: SessionDep,
    auth: AdminDep,
    status_filter: EmployeeStatus | None = Query(default=None, alias="status"),
) -> EmployeeListResponse:
    """List the tenant's employees (admin only)."""
    return await employee_service.list_employees(session, auth.tenant_id, status_filter)


@employees_router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> EmployeeResponse:
    if not auth.is_admin and employee_id != auth.user_id:
        raise UnauthorizedError("You can only view your own employee record.")
    return await employee_service.get_employee(session, auth.tenant_id, employee_id)


@employees_router.patch("/{employee_id}/status", response_model=EmployeeResponse)
async def update_employee_status(
    employee_id: uuid.UUID,
    payload: UpdateEmployeeStatusRequest,
    session: SessionDep,
    auth: AdminDep,
) -> EmployeeResponse:
    """Change an employee's status (admin only)."""
    return await employee_service.update_employee_status(
        session, auth.tenant_id, employee_id, payload.status, actor_id=auth.user_id
    )
