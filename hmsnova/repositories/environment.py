"""Environmental aspect and measurement repositories."""

from __future__ import annotations

from hmsnova.domain.environment import EnvironmentalAspect, EnvironmentalMeasurement
from hmsnova.repositories.base import BaseRepository


class EnvironmentalAspectRepository(BaseRepository[EnvironmentalAspect]):
    model = EnvironmentalAspect
    default_order_by = "significance_score"


class EnvironmentalMeasurementRepository(BaseRepository[EnvironmentalMeasurement]):
    model = EnvironmentalMeasurement
    default_order_by = "measurement_date"

    async def list_for_aspect(self, aspect_id: str) -> list[EnvironmentalMeasurement]:
        result = await self._session.execute(
            self._base_query()
            .where(EnvironmentalMeasurement.aspect_id == aspect_id)
            .order_by(EnvironmentalMeasurement.measurement_date.desc())
        )
        return list(result.scalars().all())
