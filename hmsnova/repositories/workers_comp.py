"""Workers' compensation claim and EMR repositories."""

from __future__ import annotations

from hmsnova.domain.workers_comp import EmrHistory, WorkersCompClaim
from hmsnova.repositories.base import BaseRepository


class WorkersCompClaimRepository(BaseRepository[WorkersCompClaim]):
    model = WorkersCompClaim
    default_order_by = "injury_date"

    async def list_all(self) -> list[WorkersCompClaim]:
        result = await self._session.execute(self._base_query())
        return list(result.scalars().all())


class EmrHistoryRepository(BaseRepository[EmrHistory]):
    model = EmrHistory
    default_order_by = "year"

    async def get_by_year(self, year: int) -> EmrHistory | None:
        result = await self._session.execute(
            self._base_query().where(EmrHistory.year == year)
        )
        return result.scalars().first()

    async def list_recent(self, limit: int | None = None) -> list[EmrHistory]:
        q = self._base_query().order_by(EmrHistory.year.desc())
        if limit:
            q = q.limit(limit)
        result = await self._session.execute(q)
        return list(result.scalars().all())
