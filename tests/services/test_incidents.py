"""Tests for incident registration, investigation and closure."""

from datetime import datetime, timezone

import pytest

from hmsnova.core.exceptions import ConflictError, NotFoundError
from hmsnova.core.pagination import PaginationParams
from hmsnova.repositories.events import MeasureRepository
from hmsnova.schemas.incident import (
    IncidentClose,
    IncidentCreate,
    IncidentInvestigate,
    IncidentUpdate,
)
from hmsnova.services.incidents import IncidentService, severity_band
from tests.conftest import TENANT_A, TENANT_B

OCCURRED = datetime(2025, 6, 1, 13, 30, tzinfo=timezone.utc)


def _incident(**extra) -> IncidentCreate:
    values = {
        "incident_type": "SKADE", "title": "Kuttskade i verksted",
        "description": "Ansatt kuttet seg på vinkelsliper.", "severity": 3,
        "occurred_at": OCCURRED, "reported_by": "Alice",
    }
    values.update(extra)
    return IncidentCreate(**values)


def _page() -> PaginationParams:
    return PaginationParams(page=1, limit=50, sort=None, order="desc")


@pytest.fixture
def service(session, seed):
    return IncidentService(session, TENANT_A)


class TestRegistration:
    async def test_create_opens_incident(self, service):
        incident = await service.create_incident(_incident(location="  ", witness_name=" Bob "))

        assert incident.status == "OPEN"
        assert incident.location is None
        assert incident.witness_name == "Bob"
        assert incident.osha_recordable is False

    async def test_update_ignores_null_for_required_fields(self, service):
        incident = await service.create_incident(_incident())

        updated = await service.update_incident(
            incident.id, IncidentUpdate(title=None, severity=4, status="ACTION_TAKEN")
        )

        assert updated.title == "Kuttskade i verksted"
        assert (updated.severity, updated.status) == (4, "ACTION_TAKEN")

    async def test_list_filters_by_status(self, service):
        await service.create_incident(_incident())
        other = await service.create_incident(_incident(incident_type="NESTEN", title="Nestenulykke truck"))
        await service.update_incident(other.id, IncidentUpdate(status="INVESTIGATING"))

        items, total = await service.list_incidents(_page(), status="INVESTIGATING")

        assert total == 1
        assert items[0].id == other.id

    async def test_tenant_scoped(self, session, service):
        incident = await service.create_incident(_incident())

        with pytest.raises(NotFoundError):
            await IncidentService(session, TENANT_B).get_incident(incident.id)

    async def test_delete(self, service):
        incident = await service.create_incident(_incident())

        await service.delete_incident(incident.id)

        with pytest.raises(NotFoundError):
            await service.get_incident(incident.id)


class TestInvestigationAndClosure:
    async def test_investigate_records_root_cause(self, service):
        incident = await service.create_incident(_incident())

        updated = await service.investigate_incident(
            incident.id,
            IncidentInvestigate(root_cause="Manglende opplæring i bruk av verktøy", investigated_by="Alice"),
        )

        assert updated.status == "INVESTIGATING"
        assert updated.investigated_at is not None

    async def test_close_requires_completed_measures(self, session, service):
        incident = await service.create_incident(_incident())
        measures = MeasureRepository(session, TENANT_A)
        measure = await measures.create(
            title="Opplæring vinkelsliper", due_at=datetime(2025, 7, 1, tzinfo=timezone.utc),
            incident_id=incident.id,
        )
        close = IncidentClose(closed_by="Alice", effectiveness_review="Ingen nye skader etter opplæring.")

        with pytest.raises(ConflictError):
            await service.close_incident(incident.id, close)

        await measures.update(measure.id, status="DONE")
        closed = await service.close_incident(incident.id, close)

        assert closed.status == "CLOSED"
        assert closed.closed_at is not None
        assert closed.closed_by == "Alice"

    async def test_close_twice_conflicts(self, service):
        incident = await service.create_incident(_incident())
        close = IncidentClose(closed_by="Alice", effectiveness_review="Tiltak fungerer som forventet.")
        await service.close_incident(incident.id, close)

        with pytest.raises(ConflictError):
            await service.close_incident(incident.id, close)


class TestStats:
    @pytest.mark.parametrize(("severity", "band"), [(5, "critical"), (4, "high"), (3, "medium"), (1, "low")])
    def test_severity_band(self, severity, band):
        assert severity_band(severity) == band

    async def test_counts(self, service):
        await service.create_incident(_incident(severity=5))
        await service.create_incident(_incident(incident_type="MILJO", title="Oljesøl", severity=2))

        stats = await service.stats()

        assert stats["total"] == 2
        assert stats["by_status"] == {"OPEN": 2}
        assert stats["by_type"] == {"SKADE": 1, "MILJO": 1}
        assert stats["by_severity"] == {"critical": 1, "low": 1}
