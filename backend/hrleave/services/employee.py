from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from hrleave.db import unit_of_work
from hrleave.exceptions import NotFoundError, ValidationError
from hrleave.models.employee import Employee
from hrleave.models.enums import AuditAction, AuditEntityType, EmployeeStatus
from hrleave.schemas.employee import EmployeeListResponse, EmployeeResponse
from hrleave.services.audit import model_to_audit_dict, write_audit_log
from hrleave.services.balance import ensure_balance_rows
from hrleave.services.tenant import require_tenant

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from hrleave.schemas.employee import CreateEmployeeRequest


logger = logging.getLogger(__name__)


def _build_employee_response(employee: Employee) -> EmployeeResponse:
    return EmployeeResponse(
        id=employee.id,
        tenant_id=employee.tenant_id,
        name=employee.name,
        email=employee.email,
        status=EmployeeStatus(employee.status),
        created_at=employee.created_at,
    )


async def get_employee_or_404(
    session: AsyncSession,
    tenant_id: str,
    employee_id: uuid.UUID,
) -> Employee:
    """Fetch an employee scoped to the tenant. Raises NotFoundError if absent."""
    result = await session.execute(
        select(Employee).where(
            col(Employee.id) == employee_id,
            col(Employee.tenant_id) == tenant_id,
        )
    )
    employee = result.scalar_one_or_none()
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


async def create_employee(
    session: AsyncSession,
    tenant_id: str,
    payload: CreateEmployeeRequest,
    *,
    actor_id: uuid.UUID,
) -> EmployeeResponse:
    """Register an employee and open a balance row for every leave type of the tenant."""
    tenant_id = require_tenant(tenant_id)
    async with unit_of_work(session):
        if payload.id is not None:
            existing = await session.execute(select(col(Employee.id)).where(col(Employee.id) == payload.id))
            if existing.first() is not None:
                raise ValidationError("Employee already exists", status_code=409)

        employee = Employee(
            tenant_id=tenant_id,
            name=payload.name,
            email=payload.email,
            status=payload.status.value,
        )
        if payload.id is not None:
            employee.id = payload.id
        session.add(employee)
        await session.flush()

        await ensure_balance_rows(session, tenant_id, employee.id)

        await write_audit_log(
            session,
            tenant_id=tenant_id,
            actor_id=actor_id,
            entity_type=AuditEntityType.EMPLOYEE,
            entity_id=employee.id,
            action=AuditAction.CREATE,
            after_json=model_to_audit_dict(employee),
        )
        response = _build_employee_response(employee)

    logger.info("Created employee %s for tenant %s", employee.id, tenant_id)
    return response


async def list_employees(
    session: AsyncSession,
    tenant_id: str,
    status: EmployeeStatus | None = None,
) -> EmployeeListResponse:
    """List the tenant's employees by name, optionally filtered by status."""
    tenant_id = require_tenant(tenant_id)
    query = select(Employee).where(col(Employee.tenant_id) == tenant_id)
    if status is not None:
        query = query.where(col(Employee.status) == status.value)
    result = await session.execute(query.order_by(col(Employee.name)))
    items = [_build_employee_response(e) for e in result.scalars().all()]
    return EmployeeListResponse(items=items, total=len(items))


async def get_employee(
    session: AsyncSession,
    tenant_id: str,
    employee_id: uuid.UUID,
) -> EmployeeResponse:
    tenant_id = require_tenant(tenant_id)
    return _build_employee_response(await get_employee_or_404(session, tenant_id, employee_id))


async def update_employee_status(
    session: AsyncSession,
    tenant_id: str,
    employee_id: uuid.UUID,
    status: EmployeeStatus,
    *,
    actor_id: uuid.UUID,
) -> EmployeeResponse:
    """Change an employee's status. Only Active employees take part in accrual."""
    tenant_id = require_tenant(tenant_id)
    async with unit_of_work(session):
        employee = await get_employee_or_404(session, tenant_id, employee_id)
        before_dict = model_to_audit_dict(employee)
        employee.status = status.value
        session.add(employee)
        await session.flush()

        await write_audit_log(
            session,
            tenant_id=tenant_id,
            actor_id=actor_id,
            entity_type=AuditEntityType.EMPLOYEE,
            entity_id=employee.id,
            action=AuditAction.UPDATE,
            before_json=before_dict,
            after_json=model_to_audit_dict(employee),
        )
        response = _build_employee_response(employee)

    logger.info("Employee %s of tenant %s is now %s", employee_id, tenant_id, status.value)
    return response
