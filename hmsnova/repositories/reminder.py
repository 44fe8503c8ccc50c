"""Scheduled reminder repository.

Most queries are tenant-scoped. :func:`list_due_reminders` is the exception:
the dispatch job runs once for all tenants.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hmsnova.domain.mixins import utcnow
from hmsnova.domain.reminder import ScheduledReminder
from hmsnova.repositories.base import BaseRepository

ACTIVE_STATUSES = ("PENDING", "SENT")


class ScheduledReminderRepository(BaseRepository[ScheduledReminder]):
    model = ScheduledReminder
    default_order_by = "scheduled_for"

    async def users_with_active_reminder(
        self, entity_type: str, entity_id: str, user_ids: list[str]
    ) -> set[str]:
        """User ids that already hold a pending or sent reminder for the entity."""
        if not user_ids:
            return set()
        result = await self._session.execute(
            select(ScheduledReminder.user_id)
            .where(ScheduledReminder.tenant_id == self._tenant_id)
            .where(ScheduledReminder.entity_type == entity_type)
            .where(ScheduledReminder.entity_id == entity_id)
            .where(ScheduledReminder.user_id.in_(user_ids))
            .where(ScheduledReminder.status.in_(ACTIVE_STATUSES))
        )
        return {row for row in result.scalars().all() if row}

    async def list_for_entity(self, entity_type: str, entity_id: str) -> list[ScheduledReminder]:
        result = await self._session.execute(
            self._base_query()
            .where(ScheduledReminder.entity_type == entity_type)
            .where(ScheduledReminder.entity_id == entity_id)
            .order_by(ScheduledReminder.scheduled_for.asc())
        )
        return list(result.scalars().all())

    async def cancel_pending(self, entity_type: str, entity_id: str) -> int:
        result = await self._session.execute(
            update(ScheduledReminder)
            .where(ScheduledReminder.tenant_id == self._tenant_id)
            .where(ScheduledReminder.entity_type == entity_type)
            .where(ScheduledReminder.entity_id == entity_id)
            .where(ScheduledReminder.status == "PENDING")
            .values(status="CANCELLED", updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
        )
        await self._session.flush()
        return result.rowcount


async def list_due_reminders(session: AsyncSession, cutoff: datetime) -> list[ScheduledReminder]:
    """All pending reminders (every tenant) scheduled at or before ``cutoff``."""
    result = await session.execute(
        select(ScheduledReminder)
        .options(selectinload(ScheduledReminder.user))
        .where(ScheduledReminder.status == "PENDING")
        .where(ScheduledReminder.scheduled_for <= cutoff)
        .order_by(ScheduledReminder.scheduled_for.asc())
    )
    return list(result.scalars().all())
