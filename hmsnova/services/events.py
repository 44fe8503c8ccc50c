"""Service for reminder-bearing activities: meetings, inspections, audits, measures.

The four entity types share one lifecycle. Creating an activity with
participants fans out reminders; deleting it cancels the pending ones.
"""

from __future__ import annotations

import logging
from typing import Any, Generic

from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.exceptions import NotFoundError
from hmsnova.core.pagination import PaginationParams
from hmsnova.repositories.base import BaseRepository, ModelT
from hmsnova.repositories.events import (
    AuditRepository,
    InspectionRepository,
    MeasureRepository,
    MeetingRepository,
)
from hmsnova.schemas.events import _ParticipantsMixin
from hmsnova.services.reminders import ReminderService

logger = logging.getLogger(__name__)


class ActivityService(Generic[ModelT]):
    """CRUD for one activity type. Subclasses set ``entity_type`` and ``repository``."""

    entity_type: str
    repository: type[BaseRepository]

    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo: BaseRepository[ModelT] = self.repository(session, tenant_id)
        self._reminders = ReminderService(session, tenant_id)

    async def list(self, pagination: PaginationParams, status: str | None = None) -> tuple[list[ModelT], int]:
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"status": status},
        )

    async def get(self, entity_id: str) -> ModelT:
        entity = await self._repo.get_by_id(entity_id)
        if not entity:
            raise NotFoundError(self.entity_type, entity_id)
        return entity

    async def create(self, data: _ParticipantsMixin) -> ModelT:
        values: dict[str, Any] = data.model_dump(exclude={"participant_ids"})
        entity = await self._repo.create(**values)
        logger.info("%s created: %s", self.entity_type, entity.id)

        if data.participant_ids:
            await self._reminders.create_reminders(
                entity_type=self.entity_type,
                entity_id=entity.id,
                user_ids=data.participant_ids,
                scheduled_date=entity.reminder_date,
                title=entity.title,
                description=getattr(entity, "description", None),
            )
        return entity

    async def delete(self, entity_id: str) -> None:
        await self.get(entity_id)
        await self._reminders.cancel_reminders(self.entity_type, entity_id)
        await self._repo.delete(entity_id)
        logger.info("%s deleted: %s", self.entity_type, entity_id)


class MeetingService(ActivityService):
    entity_type = "Meeting"
    repository = MeetingRepository


class InspectionService(ActivityService):
    entity_type = "Inspection"
    repository = InspectionRepository


class AuditService(ActivityService):
    entity_type = "Audit"
    repository = AuditRepository


class MeasureService(ActivityService):
    entity_type = "Measure"
    repository = MeasureRepository
