"""Integration tests for the employee directory API."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from hrleave.models.leave_balance import LeaveBalance

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

TENANT_ID = "acme"
ADMIN_ID = uuid.uuid4()
AUTH_HEADERS = {
    "X-Tenant-Id": TENANT_ID,
    "X-User-Id": str(ADMIN_ID),
    "X-Role": "admin",
}
BASE_URL = "/employees"


def _employee_payload(name: str = "Ada Lovelace", email: str = "ada@example.com", **extra: object) -> dict:
    return {"name": name, "email": email, **extra}


async def test_create_employee(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_employee_payload(), headers=AUTH_HEADERS)
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Ada Lovelace"
    assert data["email"] == "ada@example.com"
    assert data["status"] == "Active"
    assert data["tenant_id"] == TENANT_ID


async def test_create_employee_with_external_id(async_client: AsyncClient) -> None:
    employee_id = str(uuid.uuid4())
    resp = await async_client.post(BASE_URL, json=_employee_payload(id=employee_id), headers=AUTH_HEADERS)
    assert resp.status_code == 201
    assert resp.json()["id"] == employee_id

    resp = await async_client.post(BASE_URL, json=_employee_payload(id=employee_id), headers=AUTH_HEADERS)
    assert resp.status_code == 409


async def test_create_employee_opens_balances(async_client: AsyncClient, db_session: AsyncSession) -> None:
    await async_client.post("/leave/types", json={"name": "Annual", "default_balance": "20"}, headers=AUTH_HEADERS)
    await async_client.post("/leave/types", json={"name": "Sick", "default_balance": "5"}, headers=AUTH_HEADERS)

    resp = await async_client.post(BASE_URL, json=_employee_payload(), headers=AUTH_HEADERS)
    employee_id = uuid.UUID(resp.json()["id"])

    result = await db_session.execute(
        select(col(LeaveBalance.balance)).where(col(LeaveBalance.employee_id) == employee_id)
    )
    assert sorted(result.scalars().all()) == [Decimal(5), Decimal(20)]


async def test_create_employee_invalid_email(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_employee_payload(email="not-an-email"), headers=AUTH_HEADERS)
    assert resp.status_code == 422


async def test_create_employee_requires_admin(async_client: AsyncClient) -> None:
    headers = {**AUTH_HEADERS, "X-Role": "employee"}
    resp = await async_client.post(BASE_URL, json=_employee_payload(), headers=headers)
    assert resp.status_code == 403


async def test_list_employees_with_status_filter(async_client: AsyncClient) -> None:
    await async_client.post(BASE_URL, json=_employee_payload(), headers=AUTH_HEADERS)
    await async_client.post(
        BASE_URL,
        json=_employee_payload("Grace Hopper", "grace@example.com", status="On Leave"),
        headers=AUTH_HEADERS,
    )

    resp = await async_client.get(BASE_URL, headers=AUTH_HEADERS)
    assert [e["name"] for e in resp.json()["items"]] == ["Ada Lovelace", "Grace Hopper"]

    resp = await async_client.get(BASE_URL, params={"status": "On Leave"}, headers=AUTH_HEADERS)
    data = resp.json()
    assert data["total"] == 1
    assert data["items"][0]["name"] == "Grace Hopper"


async def test_get_employee_self_and_others(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_employee_payload(), headers=AUTH_HEADERS)
    employee_id = resp.json()["id"]

    own = {"X-Tenant-Id": TENANT_ID, "X-User-Id": employee_id, "X-Role": "employee"}
    resp = await async_client.get(f"{BASE_URL}/{employee_id}", headers=own)
    assert resp.status_code == 200

    stranger = {**own, "X-User-Id": str(uuid.uuid4())}
    resp = await async_client.get(f"{BASE_URL}/{employee_id}", headers=stranger)
    assert resp.status_code == 403


async def test_get_employee_not_found(async_client: AsyncClient) -> None:
    resp = await async_client.get(f"{BASE_URL}/{uuid.uuid4()}", headers=AUTH_HEADERS)
    assert resp.status_code == 404


async def test_update_employee_status(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_employee_payload(), headers=AUTH_HEADERS)
    employee_id = resp.json()["id"]

    resp = await async_client.patch(f"{BASE_URL}/{employee_id}/status", json={"status": "Inactive"}, headers=AUTH_HEADERS)
    assert resp.status_code == 200
    assert resp.json()["status"] == "Inactive"


async def test_update_employee_status_invalid_value(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_employee_payload(), headers=AUTH_HEADERS)
    employee_id = resp.json()["id"]

    resp = await async_client.patch(f"{BASE_URL}/{employee_id}/status", json={"status": "Retired"}, headers=AUTH_HEADERS)
    assert resp.status_code == 422
