"""OSHA recordkeeping service — recordable incidents and the yearly 300A log."""

from __future__ import annotations

import logging
from collections import Counter

from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.exceptions import NotFoundError
from hmsnova.domain.incident import Incident, OshaLog
from hmsnova.domain.mixins import utcnow
from hmsnova.repositories.incident import IncidentRepository, OshaLogRepository
from hmsnova.schemas.osha import CertifyOshaLog, MarkRecordable, PostOsha300A, UpsertOshaLog
from hmsnova.services.osha_rates import RateInputs, calculate_rates

logger = logging.getLogger(__name__)

_DART_CLASSIFICATIONS = {"DAYS_AWAY", "RESTRICTED_WORK", "JOB_TRANSFER"}


def summarize_incidents(incidents: list[Incident]) -> dict[str, int]:
    """Count recordable incidents into the OSHA 300A summary columns."""
    classes = Counter(i.osha_classification for i in incidents)
    illnesses = Counter(i.illness_type for i in incidents)
    return {
        "total_deaths": classes["FATALITY"],
        "total_days_away": classes["DAYS_AWAY"],
        "total_restricted": classes["RESTRICTED_WORK"],
        "total_transfer": classes["JOB_TRANSFER"],
        "total_other_recordable": classes["OTHER_RECORDABLE"],
        "total_injuries": sum(1 for i in incidents if i.event_type == "INJURY"),
        "total_skin_disorders": illnesses["SKIN_DISORDER"],
        "total_respiratory_conditions": illnesses["RESPIRATORY_CONDITION"],
        "total_poisonings": illnesses["POISONING"],
        "total_hearing_loss": illnesses["HEARING_LOSS"],
        "total_other_illnesses": illnesses["ALL_OTHER_ILLNESSES"],
    }


class OshaService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._tenant_id = tenant_id
        self._incidents = IncidentRepository(session, tenant_id)
        self._logs = OshaLogRepository(session, tenant_id)

    async def mark_incident_recordable(self, incident_id: str, data: MarkRecordable) -> Incident:
        if not await self._incidents.get_by_id(incident_id):
            raise NotFoundError("Incident", incident_id)

        values = data.model_dump()
        if values["osha_300_log_year"] is None:
            values["osha_300_log_year"] = utcnow().year
        values["osha_301_completed_at"] = utcnow() if data.osha_recordable else None
        updated = await self._incidents.update(incident_id, **values)
        return updated  # type: ignore[return-value]

    async def list_recordable_incidents(self, year: int) -> list[Incident]:
        return await self._incidents.list_recordable(year)

    async def upsert_log(self, data: UpsertOshaLog) -> OshaLog:
        """Recount the year's recordable incidents and store rates on the 300A log."""
        incidents = await self._incidents.list_recordable(data.year)
        totals = summarize_incidents(incidents)

        rates = calculate_rates(
            RateInputs(
                total_recordable_cases=len(incidents),
                total_hours_worked=data.total_hours_worked,
                days_away_restricted_transfer_cases=sum(
                    1 for i in incidents if i.osha_classification in _DART_CLASSIFICATIONS
                ),
                lost_time_cases=totals["total_days_away"],
                total_lost_work_days=sum(i.days_away_from_work or 0 for i in incidents),
                average_employees=data.avg_employee_count,
            )
        )

        values = {
            "total_hours_worked": data.total_hours_worked,
            "avg_employee_count": data.avg_employee_count,
            **totals,
            "trir": rates.trir,
            "dart_rate": rates.dart_rate,
            "ltir": rates.ltir,
            "severity_rate": rates.severity_rate,
        }

        existing = await self._logs.get_by_year(data.year)
        if existing:
            log = await self._logs.update(existing.id, **values)
        else:
            log = await self._logs.create(year=data.year, **values)

        logger.info(
            "OSHA log %s/%d: %d recordable, TRIR=%s DART=%s",
            self._tenant_id, data.year, len(incidents), rates.trir, rates.dart_rate,
        )
        return log  # type: ignore[return-value]

    async def get_log(self, year: int) -> OshaLog:
        log = await self._logs.get_by_year(year)
        if not log:
            raise NotFoundError("OSHA log", str(year))
        return log

    async def list_logs(self) -> list[OshaLog]:
        return await self._logs.list_all()

    async def certify_log(self, year: int, data: CertifyOshaLog) -> OshaLog:
        log = await self.get_log(year)
        updated = await self._logs.update(
            log.id,
            certified_at=utcnow(),
            certified_by=data.certified_by,
            certified_title=data.certified_title,
        )
        return updated  # type: ignore[return-value]

    async def post_300a_summary(self, year: int, data: PostOsha300A) -> OshaLog:
        log = await self.get_log(year)
        updated = await self._logs.update(log.id, posted_at=utcnow(), posted_by=data.posted_by)
        return updated  # type: ignore[return-value]
