"""Incident (avvik) handling: registration, root cause analysis and closure."""

from __future__ import annotations

import logging
from collections import Counter

from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.exceptions import ConflictError, NotFoundError
from hmsnova.core.pagination import PaginationParams
from hmsnova.domain.incident import Incident
from hmsnova.domain.mixins import utcnow
from hmsnova.repositories.events import MeasureRepository
from hmsnova.repositories.incident import IncidentRepository
from hmsnova.schemas.common import blank_to_none
from hmsnova.schemas.incident import (
    IncidentClose,
    IncidentCreate,
    IncidentInvestigate,
    IncidentUpdate,
)

logger = logging.getLogger(__name__)

_OPTIONAL_TEXT = ("location", "employee_name", "witness_name", "immediate_action")
_REQUIRED = ("incident_type", "title", "severity", "occurred_at", "status")


def severity_band(severity: int) -> str:
    if severity >= 5:
        return "critical"
    if severity == 4:
        return "high"
    if severity == 3:
        return "medium"
    return "low"


class IncidentService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._tenant_id = tenant_id
        self._incidents = IncidentRepository(session, tenant_id)
        self._measures = MeasureRepository(session, tenant_id)

    async def list_incidents(
        self,
        pagination: PaginationParams,
        status: str | None = None,
        incident_type: str | None = None,
    ) -> tuple[list[Incident], int]:
        return await self._incidents.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"status": status, "incident_type": incident_type},
        )

    async def get_incident(self, incident_id: str) -> Incident:
        incident = await self._incidents.get_by_id(incident_id)
        if not incident:
            raise NotFoundError("Incident", incident_id)
        return incident

    async def create_incident(self, data: IncidentCreate) -> Incident:
        values = data.model_dump()
        for key in _OPTIONAL_TEXT:
            values[key] = blank_to_none(values[key])
        incident = await self._incidents.create(**values, status="OPEN")
        logger.info(
            "Incident created: %s (%s, severity %d)", incident.id, incident.incident_type, incident.severity
        )
        return incident

    async def update_incident(self, incident_id: str, data: IncidentUpdate) -> Incident:
        previous_status = (await self.get_incident(incident_id)).status
        values = data.model_dump(exclude_unset=True)
        for key in _REQUIRED:
            if key in values and values[key] is None:
                values.pop(key)
        for key in _OPTIONAL_TEXT:
            if key in values:
                values[key] = blank_to_none(values[key])

        updated = await self._incidents.update(incident_id, **values)
        if updated.status != previous_status:  # type: ignore[union-attr]
            logger.info("Incident %s status changed to %s", incident_id, updated.status)  # type: ignore[union-attr]
        return updated  # type: ignore[return-value]

    async def investigate_incident(self, incident_id: str, data: IncidentInvestigate) -> Incident:
        incident = await self.get_incident(incident_id)
        if incident.status == "CLOSED":
            raise ConflictError(f"Incident '{incident.title}' is already closed")
        updated = await self._incidents.update(
            incident_id, **data.model_dump(), investigated_at=utcnow(), status="INVESTIGATING"
        )
        return updated  # type: ignore[return-value]

    async def close_incident(self, incident_id: str, data: IncidentClose) -> Incident:
        """Close the incident once every linked measure is done."""
        incident = await self.get_incident(incident_id)
        if incident.status == "CLOSED":
            raise ConflictError(f"Incident '{incident.title}' is already closed")

        measures = await self._measures.list_for_incident(incident_id)
        if any(m.status != "DONE" for m in measures):
            raise ConflictError("All measures must be completed before the incident can be closed")

        updated = await self._incidents.update(
            incident_id, **data.model_dump(), closed_at=utcnow(), status="CLOSED"
        )
        logger.info("Incident closed: %s", incident_id)
        return updated  # type: ignore[return-value]

    async def delete_incident(self, incident_id: str) -> None:
        await self.get_incident(incident_id)
        await self._incidents.delete(incident_id)
        logger.info("Incident deleted: %s", incident_id)

    async def stats(self) -> dict:
        incidents = await self._incidents.list_all()
        return {
            "total": len(incidents),
            "by_status": dict(Counter(i.status for i in incidents)),
            "by_type": dict(Counter(i.incident_type for i in incidents)),
            "by_severity": dict(Counter(severity_band(i.severity) for i in incidents)),
        }
