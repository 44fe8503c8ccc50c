"""Per-user notification preferences that drive the reminder fan-out."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.exceptions import NotFoundError, ValidationError
from hmsnova.domain.tenant import User
from hmsnova.repositories.tenant import UserRepository
from hmsnova.schemas.common import blank_to_none
from hmsnova.schemas.user import NotificationSettingsUpdate
from hmsnova.services.sms import format_phone_number, is_valid_norwegian_phone

logger = logging.getLogger(__name__)


class UserSettingsService:
    """Users are shared between tenants; only members of this tenant are visible."""

    def __init__(self, session: AsyncSession, tenant_id: str):
        self._session = session
        self._tenant_id = tenant_id
        self._users = UserRepository(session)

    async def get_member(self, user_id: str) -> User:
        user = await self._users.get_tenant_member(self._tenant_id, user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    async def update_notification_settings(
        self, user_id: str, data: NotificationSettingsUpdate
    ) -> User:
        user = await self.get_member(user_id)
        values = data.model_dump(exclude_unset=True)

        if "phone" in values:
            phone = blank_to_none(values.pop("phone"))
            if phone is not None and not is_valid_norwegian_phone(phone):
                raise ValidationError("Phone number must be a Norwegian number (+47 and 8 digits)")
            user.phone = format_phone_number(phone) if phone else None

        for key, value in values.items():
            if value is not None:
                setattr(user, key, value)

        if user.notify_by_sms and not user.phone:
            raise ValidationError("A phone number is required to receive SMS reminders")

        await self._session.flush()
        logger.info("Notification settings updated for user %s", user_id)
        return user
