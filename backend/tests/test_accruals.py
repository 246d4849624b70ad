"""Tests for the monthly accrual sweep and the one-shot worker."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select
from sqlmodel import col

from hrleave import worker
from hrleave.models.audit import AuditLog
from hrleave.models.leave_balance import LeaveBalance
from hrleave.services import accrual as accrual_service
from hrleave.services.accrual import run_accrual_for_all_tenants, run_monthly_accrual

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from hrleave.services.notification import InMemoryNotifier

TENANT_ID = "acme"
ADMIN_ID = uuid.uuid4()
AUTH_HEADERS = {
    "X-Tenant-Id": TENANT_ID,
    "X-User-Id": str(ADMIN_ID),
    "X-Role": "admin",
}
RUN_URL = "/leave/accruals/run"


def _headers(tenant_id: str) -> dict[str, str]:
    return {**AUTH_HEADERS, "X-Tenant-Id": tenant_id}


async def _create_employee(client: AsyncClient, name: str, tenant_id: str = TENANT_ID) -> str:
    resp = await client.post(
        "/employees",
        json={"name": name, "email": f"{name.lower()}@example.com"},
        headers=_headers(tenant_id),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


async def _create_type(
    client: AsyncClient,
    name: str = "Annual",
    accrual_rate: str = "1.5",
    tenant_id: str = TENANT_ID,
) -> str:
    resp = await client.post(
        "/leave/types",
        json={"name": name, "default_balance": "0", "accrual_rate": accrual_rate},
        headers=_headers(tenant_id),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


async def _balances(session: AsyncSession, leave_type_id: str) -> dict[str, Decimal]:
    result = await session.execute(
        select(col(LeaveBalance.employee_id), col(LeaveBalance.balance)).where(
            col(LeaveBalance.leave_type_id) == uuid.UUID(leave_type_id)
        )
    )
    return {str(employee_id): balance for employee_id, balance in result.all()}


# ---------------------------------------------------------------------------
# run_monthly_accrual
# ---------------------------------------------------------------------------


async def test_accrual_credits_each_active_employee(async_client: AsyncClient, db_session: AsyncSession) -> None:
    """Rate 1.5 with two employees: one run adds 1.5 each, a second run adds it again."""
    ada = await _create_employee(async_client, "Ada")
    grace = await _create_employee(async_client, "Grace")
    type_id = await _create_type(async_client)

    resp = await async_client.post(RUN_URL, headers=AUTH_HEADERS)
    assert resp.status_code == 200
    data = resp.json()
    assert data["employees"] == 2
    assert data["leave_types"] == 1
    assert data["updated"] == 2
    assert Decimal(data["total_accrued"]) == Decimal(3)
    assert await _balances(db_session, type_id) == {ada: Decimal("1.5"), grace: Decimal("1.5")}

    resp = await async_client.post(RUN_URL, headers=AUTH_HEADERS)
    assert resp.status_code == 200
    assert await _balances(db_session, type_id) == {ada: Decimal(3), grace: Decimal(3)}


async def test_accrual_skips_inactive_employees(async_client: AsyncClient, db_session: AsyncSession) -> None:
    ada = await _create_employee(async_client, "Ada")
    grace = await _create_employee(async_client, "Grace")
    type_id = await _create_type(async_client)
    resp = await async_client.patch(f"/employees/{grace}/status", json={"status": "Inactive"}, headers=AUTH_HEADERS)
    assert resp.status_code == 200

    resp = await async_client.post(RUN_URL, headers=AUTH_HEADERS)
    assert resp.json()["updated"] == 1
    assert await _balances(db_session, type_id) == {ada: Decimal("1.5"), grace: Decimal(0)}


async def test_accrual_ignores_non_accruing_types(async_client: AsyncClient, db_session: AsyncSession) -> None:
    ada = await _create_employee(async_client, "Ada")
    annual = await _create_type(async_client, "Annual", "2")
    unpaid = await _create_type(async_client, "Unpaid", "0")

    resp = await async_client.post(RUN_URL, headers=AUTH_HEADERS)
    assert resp.json()["leave_types"] == 1
    assert await _balances(db_session, annual) == {ada: Decimal(2)}
    assert await _balances(db_session, unpaid) == {ada: Decimal(0)}


async def test_accrual_on_empty_tenant_is_noop(async_client: AsyncClient, notifier: InMemoryNotifier) -> None:
    resp = await async_client.post(RUN_URL, headers=AUTH_HEADERS)
    assert resp.status_code == 200
    data = resp.json()
    assert data == {
        "tenant_id": TENANT_ID,
        "employees": 0,
        "leave_types": 0,
        "updated": 0,
        "total_accrued": data["total_accrued"],
    }
    assert Decimal(data["total_accrued"]) == 0
    assert notifier.events() == []


async def test_accrual_does_not_touch_other_tenants(async_client: AsyncClient, db_session: AsyncSession) -> None:
    await _create_employee(async_client, "Ada")
    await _create_type(async_client)
    other_employee = await _create_employee(async_client, "Hal", tenant_id="globex")
    other_type = await _create_type(async_client, tenant_id="globex")

    await async_client.post(RUN_URL, headers=AUTH_HEADERS)

    assert await _balances(db_session, other_type) == {other_employee: Decimal(0)}


async def test_accrual_requires_admin(async_client: AsyncClient) -> None:
    headers = {**AUTH_HEADERS, "X-Role": "employee"}
    resp = await async_client.post(RUN_URL, headers=headers)
    assert resp.status_code == 403


async def test_accrual_audits_and_notifies(
    async_client: AsyncClient,
    db_session: AsyncSession,
    notifier: InMemoryNotifier,
) -> None:
    await _create_employee(async_client, "Ada")
    await _create_type(async_client)

    await async_client.post(RUN_URL, headers=AUTH_HEADERS)

    assert notifier.events() == ["accrual.completed"]
    result = await db_session.execute(select(AuditLog).where(col(AuditLog.entity_type) == "ACCRUAL"))
    entry = result.scalar_one()
    assert entry.actor_id == ADMIN_ID
    assert entry.after_json is not None
    assert entry.after_json["updated"] == 1


# ---------------------------------------------------------------------------
# All tenants
# ---------------------------------------------------------------------------


async def test_run_accrual_for_all_tenants(
    async_client: AsyncClient,
    db_session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    ada = await _create_employee(async_client, "Ada")
    acme_type = await _create_type(async_client)
    hal = await _create_employee(async_client, "Hal", tenant_id="globex")
    globex_type = await _create_type(async_client, accrual_rate="2", tenant_id="globex")

    batch = await run_accrual_for_all_tenants(session_factory)

    assert batch.errors == 0
    assert sorted(run.tenant_id for run in batch.runs) == ["acme", "globex"]
    assert await _balances(db_session, acme_type) == {ada: Decimal("1.5")}
    assert await _balances(db_session, globex_type) == {hal: Decimal(2)}


async def test_failing_tenant_does_not_stop_others(
    async_client: AsyncClient,
    db_session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    await _create_employee(async_client, "Ada")
    await _create_type(async_client)
    hal = await _create_employee(async_client, "Hal", tenant_id="globex")
    globex_type = await _create_type(async_client, accrual_rate="2", tenant_id="globex")

    original = accrual_service.run_monthly_accrual

    async def _flaky(session: AsyncSession, tenant_id: str) -> accrual_service.AccrualRunResult:
        if tenant_id == "acme":
            raise RuntimeError("boom")
        return await original(session, tenant_id)

    monkeypatch.setattr(accrual_service, "run_monthly_accrual", _flaky)

    batch = await run_accrual_for_all_tenants(session_factory)

    assert batch.errors == 1
    assert batch.failed_tenants == ["acme"]
    assert [run.tenant_id for run in batch.runs] == ["globex"]
    assert await _balances(db_session, globex_type) == {hal: Decimal(2)}


async def test_run_monthly_accrual_service(async_client: AsyncClient, db_session: AsyncSession) -> None:
    await _create_employee(async_client, "Ada")
    await _create_type(async_client, accrual_rate="1.25")

    result = await run_monthly_accrual(db_session, TENANT_ID)

    assert result.updated == 1
    assert result.total_accrued == Decimal("1.25")


async def test_worker_runs_once_and_reports_errors(
    async_client: AsyncClient,
    session_factory: async_sessionmaker[AsyncSession],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    await _create_employee(async_client, "Ada")
    await _create_type(async_client)
    monkeypatch.setattr(worker, "get_session_factory", lambda: session_factory)

    assert await worker.run_accrual_once() == 0
