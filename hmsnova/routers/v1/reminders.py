"""Reminder router — fan-out, cancellation, listing and the cron dispatch hook."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.deps import get_tenant_id, require_cron_secret
from hmsnova.core.response import DataResponse
from hmsnova.db.base import get_db
from hmsnova.schemas.reminder import (
    CancelRemindersResult,
    CreateReminders,
    CreateRemindersResult,
    DispatchResult,
    ReminderEntityType,
    ReminderOut,
)
from hmsnova.services.reminders import ReminderService, dispatch_pending_reminders

router = APIRouter(prefix="/reminders", tags=["Reminders"])


def _svc(session: AsyncSession, tenant_id: str) -> ReminderService:
    return ReminderService(session, tenant_id)


@router.post("", response_model=DataResponse[CreateRemindersResult])
async def create_reminders(
    body: CreateReminders,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Fan out reminders for an activity to the given users."""
    created = await _svc(session, tenant_id).create_reminders(**body.model_dump())
    return {"data": {"created": created}}


@router.get("", response_model=DataResponse[list[ReminderOut]])
async def list_reminders(
    entity_type: ReminderEntityType = Query(..., alias="entityType"),
    entity_id: str = Query(..., alias="entityId"),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    reminders = await _svc(session, tenant_id).list_for_entity(entity_type, entity_id)
    return {"data": [ReminderOut.model_validate(r) for r in reminders]}


@router.post("/cancel", response_model=DataResponse[CancelRemindersResult])
async def cancel_reminders(
    entity_type: ReminderEntityType = Query(..., alias="entityType"),
    entity_id: str = Query(..., alias="entityId"),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    cancelled = await _svc(session, tenant_id).cancel_reminders(entity_type, entity_id)
    return {"data": {"cancelled": cancelled}}


@router.post(
    "/dispatch",
    response_model=DataResponse[DispatchResult],
    dependencies=[Depends(require_cron_secret)],
)
async def dispatch_reminders(session: AsyncSession = Depends(get_db)):
    """Send every due reminder for all tenants. Called by the platform cron."""
    summary = await dispatch_pending_reminders(session)
    return {"data": DispatchResult.model_validate(summary)}
