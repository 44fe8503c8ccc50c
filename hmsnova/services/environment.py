"""ISO 14001 environmental aspects and their measurements."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.exceptions import NotFoundError
from hmsnova.core.pagination import PaginationParams
from hmsnova.domain.environment import EnvironmentalAspect, EnvironmentalMeasurement
from hmsnova.repositories.environment import (
    EnvironmentalAspectRepository,
    EnvironmentalMeasurementRepository,
)
from hmsnova.schemas.common import blank_to_none
from hmsnova.schemas.environment import AspectCreate, AspectUpdate, MeasurementCreate

logger = logging.getLogger(__name__)

_TEXT_FIELDS = (
    "description",
    "process",
    "location",
    "legal_requirement",
    "control_measures",
    "monitoring_method",
    "owner_id",
    "goal_id",
    "unit",
    "method",
    "notes",
    "responsible_id",
)


def calculate_significance(severity: int, likelihood: int) -> int:
    return severity * likelihood


def measurement_status(
    measured: float, limit: float | None, target: float | None
) -> str:
    """Over the limit is non-compliant; over the target is a warning."""
    if limit is not None and measured > limit:
        return "NON_COMPLIANT"
    if target is not None and measured > target:
        return "WARNING"
    return "COMPLIANT"


def _clean(values: dict[str, Any]) -> dict[str, Any]:
    for key in _TEXT_FIELDS:
        if key in values and isinstance(values[key], str):
            values[key] = blank_to_none(values[key])
    return values


class EnvironmentService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._aspects = EnvironmentalAspectRepository(session, tenant_id)
        self._measurements = EnvironmentalMeasurementRepository(session, tenant_id)

    # ── Aspects ───────────────────────────────────────────────────────────

    async def list_aspects(
        self, pagination: PaginationParams, status: str | None = None, category: str | None = None
    ) -> tuple[list[EnvironmentalAspect], int]:
        return await self._aspects.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"status": status, "category": category},
        )

    async def get_aspect(self, aspect_id: str) -> EnvironmentalAspect:
        aspect = await self._aspects.get_by_id(aspect_id)
        if not aspect:
            raise NotFoundError("EnvironmentalAspect", aspect_id)
        return aspect

    async def create_aspect(self, data: AspectCreate) -> EnvironmentalAspect:
        values = _clean(data.model_dump())
        values["significance_score"] = calculate_significance(data.severity, data.likelihood)
        aspect = await self._aspects.create(**values)
        logger.info("Environmental aspect created: %s (score=%d)", aspect.id, aspect.significance_score)
        return aspect

    async def update_aspect(self, aspect_id: str, data: AspectUpdate) -> EnvironmentalAspect:
        existing = await self.get_aspect(aspect_id)
        values = _clean(data.model_dump(exclude_unset=True))
        # Explicit nulls for required columns mean "unchanged"
        for key in ("title", "category", "impact_type", "severity", "likelihood", "status"):
            if key in values and values[key] is None:
                values.pop(key)

        if "severity" in values or "likelihood" in values:
            values["significance_score"] = calculate_significance(
                values.get("severity", existing.severity),
                values.get("likelihood", existing.likelihood),
            )
        updated = await self._aspects.update(aspect_id, **values)
        return updated  # type: ignore[return-value]

    async def delete_aspect(self, aspect_id: str) -> None:
        await self.get_aspect(aspect_id)
        for measurement in await self._measurements.list_for_aspect(aspect_id):
            await self._measurements.delete(measurement.id)
        await self._aspects.delete(aspect_id)
        logger.info("Environmental aspect deleted: %s", aspect_id)

    # ── Measurements ──────────────────────────────────────────────────────

    async def list_measurements(self, aspect_id: str) -> list[EnvironmentalMeasurement]:
        await self.get_aspect(aspect_id)
        return await self._measurements.list_for_aspect(aspect_id)

    async def create_measurement(
        self, aspect_id: str, data: MeasurementCreate
    ) -> EnvironmentalMeasurement:
        await self.get_aspect(aspect_id)
        values = _clean(data.model_dump())
        values["status"] = measurement_status(
            data.measured_value, data.limit_value, data.target_value
        )
        measurement = await self._measurements.create(aspect_id=aspect_id, **values)
        if measurement.status != "COMPLIANT":
            logger.warning(
                "Measurement %s on aspect %s is %s", measurement.id, aspect_id, measurement.status
            )
        return measurement
