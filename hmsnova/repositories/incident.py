"""Incident and OSHA 300 log repositories."""

from __future__ import annotations

from hmsnova.domain.incident import Incident, OshaLog
from hmsnova.repositories.base import BaseRepository


class IncidentRepository(BaseRepository[Incident]):
    model = Incident
    default_order_by = "occurred_at"

    async def list_all(self) -> list[Incident]:
        result = await self._session.execute(self._base_query())
        return list(result.scalars().all())

    async def list_recordable(self, year: int) -> list[Incident]:
        result = await self._session.execute(
            self._base_query()
            .where(Incident.osha_recordable.is_(True))
            .where(Incident.osha_300_log_year == year)
            .order_by(Incident.occurred_at.asc())
        )
        return list(result.scalars().all())


class OshaLogRepository(BaseRepository[OshaLog]):
    model = OshaLog
    default_order_by = "year"

    async def get_by_year(self, year: int) -> OshaLog | None:
        result = await self._session.execute(
            self._base_query().where(OshaLog.year == year)
        )
        return result.scalars().first()

    async def list_all(self) -> list[OshaLog]:
        result = await self._session.execute(
            self._base_query().order_by(OshaLog.year.desc())
        )
        return list(result.scalars().all())
