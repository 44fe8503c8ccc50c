"""Repositories for meetings, inspections, audits and measures."""

from hmsnova.domain.events import Audit, Inspection, Measure, Meeting
from hmsnova.repositories.base import BaseRepository


class MeetingRepository(BaseRepository[Meeting]):
    model = Meeting
    default_order_by = "scheduled_date"


class InspectionRepository(BaseRepository[Inspection]):
    model = Inspection
    default_order_by = "scheduled_date"


class AuditRepository(BaseRepository[Audit]):
    model = Audit
    default_order_by = "scheduled_date"


class MeasureRepository(BaseRepository[Measure]):
    model = Measure
    default_order_by = "due_at"

    async def list_for_incident(self, incident_id: str) -> list[Measure]:
        result = await self._session.execute(
            self._base_query().where(Measure.incident_id == incident_id)
        )
        return list(result.scalars().all())
