"""User router — notification preferences within the current tenant."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.deps import get_tenant_id
from hmsnova.core.response import DataResponse
from hmsnova.db.base import get_db
from hmsnova.schemas.user import NotificationSettings, NotificationSettingsUpdate
from hmsnova.services.users import UserSettingsService

router = APIRouter(prefix="/users", tags=["Users"])


def _svc(session: AsyncSession, tenant_id: str) -> UserSettingsService:
    return UserSettingsService(session, tenant_id)


@router.get("/{user_id}/notification-settings", response_model=DataResponse[NotificationSettings])
async def get_notification_settings(
    user_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    user = await _svc(session, tenant_id).get_member(user_id)
    return {"data": NotificationSettings.model_validate(user)}


@router.put("/{user_id}/notification-settings", response_model=DataResponse[NotificationSettings])
async def update_notification_settings(
    user_id: str,
    body: NotificationSettingsUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Change which reminders the user gets, how, and how far ahead."""
    user = await _svc(session, tenant_id).update_notification_settings(user_id, body)
    return {"data": NotificationSettings.model_validate(user)}
