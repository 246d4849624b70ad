# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from hrleave.api.deps import AdminDep, AuthDep
from hrleave.db import SessionDep
from hrleave.schemas.holiday import (
    CreateHolidayRequest,
    HolidayListResponse,
    HolidayResponse,
    UpdateHolidayRequest,
)
from hrleave.services import holiday as holiday_service

holidays_router = APIRouter(prefix="/leave/holidays", tags=["holidays"])


@holidays_router.post(
    "",
    response_model=HolidayResponse,
    status_code=201,
)
async def create_holiday(
    payload: CreateHolidayRequest,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Create a tenant holiday (admin only)."""
    return await holiday_service.create_holiday(session, auth.tenant_id, payload, actor_id=auth.user_id)


@holidays_router.get(
    "",
    response_model=HolidayListResponse,
)
async def list_holidays(
    session: SessionDep,
    auth: AuthDep,
    year: int | None = Query(default=None, ge=1900, le=9999),
) -> HolidayListResponse:
    """List tenant holidays with optional year filter."""
    return await holiday_service.list_holidays(session, auth.tenant_id, year)


@holidays_router.patch(
    "/{holiday_id}",
    response_model=HolidayResponse,
)
async def update_holiday(
    holiday_id: uuid.UUID,
    payload: UpdateHolidayRequest,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Update a tenant holiday (admin only)."""
    return await holiday_service.update_holiday(
        session, auth.tenant_id, holiday_id, payload, actor_id=auth.user_id
    )


@holidays_router.delete(
    "/{holiday_id}",
    status_code=204,
)
async def delete_holiday(
    holiday_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Delete a tenant holiday (admin only)."""
    await holiday_service.delete_holiday(session, auth.tenant_id, holiday_id, actor_id=auth.user_id)
