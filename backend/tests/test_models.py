from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from hrleave.models import (
    AuditLog,
    Employee,
    Holiday,
    LeaveBalance,
    LeaveRequest,
    LeaveType,
    SQLModel,
)
from hrleave.models.enums import EmployeeStatus, LeaveRequestStatus

EXPECTED_TABLES = {
    "audit_log",
    "employee",
    "holiday",
    "leave_balance",
    "leave_request",
    "leave_type",
}


def test_all_tables_registered() -> None:
    assert set(SQLModel.metadata.tables.keys()) == EXPECTED_TABLES


def test_leave_type_defaults() -> None:
    leave_type = LeaveType(tenant_id="acme", name="Annual")
    assert leave_type.requires_approval is True
    assert leave_type.default_balance == Decimal(0)
    assert leave_type.accrual_rate == Decimal(0)
    assert leave_type.id is not None


def test_leave_type_name_unique_per_tenant() -> None:
    constraints = {c.name for c in SQLModel.metadata.tables["leave_type"].constraints}
    assert "uq_leave_type_tenant_name" in constraints


def test_leave_balance_composite_primary_key() -> None:
    table = SQLModel.metadata.tables["leave_balance"]
    assert [c.name for c in table.primary_key.columns] == ["tenant_id", "employee_id", "leave_type_id"]


def test_leave_balance_numeric_precision() -> None:
    balance_type = SQLModel.metadata.tables["leave_balance"].c.balance.type
    assert balance_type.precision == 7
    assert balance_type.scale == 2


def test_leave_balance_instantiation() -> None:
    balance = LeaveBalance(
        tenant_id="acme",
        employee_id=uuid.uuid4(),
        leave_type_id=uuid.uuid4(),
        balance=Decimal("12.5"),
    )
    assert balance.balance == Decimal("12.5")
    assert balance.last_updated is not None


def test_leave_request_defaults_to_pending() -> None:
    request = LeaveRequest(
        tenant_id="acme",
        employee_id=uuid.uuid4(),
        leave_type_id=uuid.uuid4(),
        start_date=date(2024, 7, 1),
        end_date=date(2024, 7, 5),
        reason="Summer holiday",
    )
    assert request.status == LeaveRequestStatus.PENDING
    assert request.approver_id is None
    assert request.approval_date is None


def test_requested_days_is_inclusive() -> None:
    request = LeaveRequest(
        tenant_id="acme",
        employee_id=uuid.uuid4(),
        leave_type_id=uuid.uuid4(),
        start_date=date(2024, 2, 28),
        end_date=date(2024, 3, 1),
        reason="Leap year trip",
    )
    assert request.requested_days == 3


def test_leave_request_date_check_constraint() -> None:
    constraints = {c.name for c in SQLModel.metadata.tables["leave_request"].constraints}
    assert "ck_leave_request_dates" in constraints


def test_holiday_unique_per_tenant_date() -> None:
    constraints = {c.name for c in SQLModel.metadata.tables["holiday"].constraints}
    assert "uq_holiday_tenant_date" in constraints
    holiday = Holiday(tenant_id="acme", date=date(2025, 12, 25), name="Christmas Day")
    assert holiday.description is None


def test_employee_defaults_to_active() -> None:
    employee = Employee(tenant_id="acme", name="Ada Lovelace", email="ada@example.com")
    assert employee.status == EmployeeStatus.ACTIVE


def test_audit_log_instantiation() -> None:
    entry = AuditLog(
        tenant_id="acme",
        actor_id=uuid.uuid4(),
        entity_type="LEAVE_TYPE",
        entity_id=uuid.uuid4(),
        action="CREATE",
        after_json={"name": "Annual"},
    )
    assert entry.before_json is None
    assert entry.created_at is not None


def test_request_status_values() -> None:
    assert [s.value for s in LeaveRequestStatus] == ["Pending", "Approved", "Rejected", "Cancelled"]
