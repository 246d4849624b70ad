from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import extract, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from hrleave.db import unit_of_work
from hrleave.exceptions import NotFoundError, ValidationError
from hrleave.models.enums import AuditAction, AuditEntityType
from hrleave.models.holiday import Holiday
from hrleave.schemas.holiday import HolidayListResponse, HolidayResponse
from hrleave.services.audit import model_to_audit_dict, write_audit_log
from hrleave.services.tenant import require_tenant

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from hrleave.schemas.holiday import CreateHolidayRequest, UpdateHolidayRequest

logger = logging.getLogger(__name__)

_DUPLICATE_DATE = "Holiday already exists for this date"


def _build_holiday_response(holiday: Holiday) -> HolidayResponse:
    return HolidayResponse(
        id=holiday.id,
        tenant_id=holiday.tenant_id,
        date=holiday.date,
        name=holiday.name,
        description=holiday.description,
    )


async def _flush_unique_date(session: AsyncSession) -> None:
    try:
        await session.flush()
    except IntegrityError:
        raise ValidationError(_DUPLICATE_DATE, status_code=409) from None


async def create_holiday(
    session: AsyncSession,
    tenant_id: str,
    payload: CreateHolidayRequest,
    *,
    actor_id: uuid.UUID,
) -> HolidayResponse:
    """Create a tenant holiday."""
    tenant_id = require_tenant(tenant_id)
    async with unit_of_work(session):
        holiday = Holiday(
            tenant_id=tenant_id,
            date=payload.date,
            name=payload.name,
            description=payload.description,
        )
        session.add(holiday)
        await _flush_unique_date(session)

        await write_audit_log(
            session,
            tenant_id=tenant_id,
            actor_id=actor_id,
            entity_type=AuditEntityType.HOLIDAY,
            entity_id=holiday.id,
            action=AuditAction.CREATE,
            after_json=model_to_audit_dict(holiday),
        )
        response = _build_holiday_response(holiday)

    logger.info("Created holiday %s on %s for tenant %s", holiday.id, holiday.date, tenant_id)
    return response


async def list_holidays(
    session: AsyncSession,
    tenant_id: str,
    year: int | None = None,
) -> HolidayListResponse:
    """List tenant holidays ordered by date, with optional year filter."""
    tenant_id = require_tenant(tenant_id)
    base_filter = [col(Holiday.tenant_id) == tenant_id]

    if year is not None:
        base_filter.append(extract("year", col(Holiday.date)) == year)

    result = await session.execute(select(Holiday).where(*base_filter).order_by(col(Holiday.date)))
    items = [_build_holiday_response(h) for h in result.scalars().all()]
    return HolidayListResponse(items=items, total=len(items))


async def get_holiday(
    session: AsyncSession,
    tenant_id: str,
    holiday_id: uuid.UUID,
) -> Holiday:
    """Get a single holiday or raise NotFoundError."""
    result = await session.execute(
        select(Holiday).where(
            col(Holiday.id) == holiday_id,
            col(Holiday.tenant_id) == tenant_id,
        )
    )
    holiday = result.scalar_one_or_none()
    if holiday is None:
        raise NotFoundError("Holiday not found")
    return holiday


async def update_holiday(
    session: AsyncSession,
    tenant_id: str,
    holiday_id: uuid.UUID,
    payload: UpdateHolidayRequest,
    *,
    actor_id: uuid.UUID,
) -> HolidayResponse:
    """Apply a partial update; moving onto a date that already has a holiday is a conflict."""
    tenant_id = require_tenant(tenant_id)
    async with unit_of_work(session):
        holiday = await get_holiday(session, tenant_id, holiday_id)
        updates = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key == "description"
        }
        if not updates:
            return _build_holiday_response(holiday)

        before_dict = model_to_audit_dict(holiday)
        for key, value in updates.items():
            setattr(holiday, key, value)
        session.add(holiday)
        await _flush_unique_date(session)

        await write_audit_log(
            session,
            tenant_id=tenant_id,
            actor_id=actor_id,
            entity_type=AuditEntityType.HOLIDAY,
            entity_id=holiday.id,
            action=AuditAction.UPDATE,
            before_json=before_dict,
            after_json=model_to_audit_dict(holiday),
        )
        response = _build_holiday_response(holiday)

    return response


async def delete_holiday(
    session: AsyncSession,
    tenant_id: str,
    holiday_id: uuid.UUID,
    *,
    actor_id: uuid.UUID,
) -> None:
    """Delete a tenant holiday."""
    tenant_id = require_tenant(tenant_id)
    async with unit_of_work(session):
        holiday = await get_holiday(session, tenant_id, holiday_id)

        await write_audit_log(
            session,
            tenant_id=tenant_id,
            actor_id=actor_id,
            entity_type=AuditEntityType.HOLIDAY,
            entity_id=holiday.id,
            action=AuditAction.DELETE,
            before_json=model_to_audit_dict(holiday),
        )
        await session.delete(holiday)

    logger.info("Deleted holiday %s for tenant %s", holiday_id, tenant_id)
