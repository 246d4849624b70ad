from sqlmodel import SQLModel

from hrleave.models.audit import AuditLog
from hrleave.models.base import TenantMixin, TimestampMixin, UUIDBase
from hrleave.models.employee import Employee
from hrleave.models.enums import AuditAction, AuditEntityType, EmployeeStatus, LeaveRequestStatus
from hrleave.models.holiday import Holiday
from hrleave.models.leave_balance import LeaveBalance
from hrleave.models.leave_request import LeaveRequest
from hrleave.models.leave_type import LeaveType

__all__ = [
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "Employee",
    "EmployeeStatus",
    "Holiday",
    "LeaveBalance",
    "LeaveRequest",
    "LeaveRequestStatus",
    "LeaveType",
    "SQLModel",
    "TenantMixin",
    "TimestampMixin",
    "UUIDBase",
]
