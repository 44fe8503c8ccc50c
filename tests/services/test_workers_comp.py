"""Tests for workers' compensation claims and EMR history."""

from datetime import date

import pytest

from hmsnova.core.exceptions import ConflictError, NotFoundError
from hmsnova.core.pagination import PaginationParams
from hmsnova.schemas.workers_comp import ClaimClose, ClaimCreate, ClaimUpdate, RecordEmr
from hmsnova.services.workers_comp import WorkersCompService
from tests.conftest import TENANT_A, TENANT_B


def _claim(number: str, **extra) -> ClaimCreate:
    return ClaimCreate(
        claim_number=number, carrier_name="If Skadeforsikring", claimant_name="Per Hansen",
        injury_date=date(2025, 9, 1), reported_date=date(2025, 9, 2), **extra,
    )


@pytest.fixture
def service(session, seed):
    return WorkersCompService(session, TENANT_A)


def _page() -> PaginationParams:
    return PaginationParams(page=1, limit=50, sort=None, order="desc")


class TestClaims:
    async def test_create_opens_claim(self, service):
        claim = await service.create_claim(_claim("WC-1", reserve_amount=25_000))

        assert claim.status == "OPEN"
        assert claim.closed_at is None

    async def test_close_records_outcome(self, service):
        claim = await service.create_claim(_claim("WC-2"))

        closed = await service.close_claim(claim.id, ClaimClose(paid_amount=12_500, lost_work_days=8))

        assert closed.status == "CLOSED"
        assert closed.closed_at is not None
        assert (closed.paid_amount, closed.lost_work_days) == (12_500, 8)

    async def test_close_twice_conflicts(self, service):
        claim = await service.create_claim(_claim("WC-3"))
        await service.close_claim(claim.id, ClaimClose())

        with pytest.raises(ConflictError):
            await service.close_claim(claim.id, ClaimClose())

    async def test_update_to_closed_stamps_closed_at(self, service):
        claim = await service.create_claim(_claim("WC-4"))

        updated = await service.update_claim(claim.id, ClaimUpdate(status="CLOSED"))

        assert updated.closed_at is not None

    async def test_filter_by_status(self, service):
        open_claim = await service.create_claim(_claim("WC-5"))
        closed = await service.create_claim(_claim("WC-6"))
        await service.close_claim(closed.id, ClaimClose())

        items, total = await service.list_claims(_page(), status="OPEN")

        assert total == 1
        assert items[0].id == open_claim.id

    async def test_claims_are_tenant_scoped(self, session, service):
        claim = await service.create_claim(_claim("WC-7"))

        with pytest.raises(NotFoundError):
            await WorkersCompService(session, TENANT_B).get_claim(claim.id)


class TestEmrAndSummary:
    async def test_record_emr_upserts_by_year(self, service):
        first = await service.record_emr(RecordEmr(year=2025, emr_value=1.1))
        second = await service.record_emr(RecordEmr(year=2025, emr_value=0.95, carrier="Gjensidige"))

        assert second.id == first.id
        assert second.emr_value == 0.95
        assert len(await service.list_emr()) == 1

    async def test_summary(self, service):
        for year, value in [(2022, 1.2), (2023, 1.05), (2024, 0.98), (2025, 0.9)]:
            await service.record_emr(RecordEmr(year=year, emr_value=value))
        await service.create_claim(_claim("WC-8"))
        closed = await service.create_claim(_claim("WC-9"))
        await service.close_claim(closed.id, ClaimClose(paid_amount=4_000, lost_work_days=3))

        summary = await service.summary()

        assert summary["open_claims"] == 1
        assert summary["total_claims"] == 2
        assert summary["total_paid"] == 4_000
        assert summary["total_lost_days"] == 3
        assert summary["current_emr"].year == 2025
        assert [r.year for r in summary["emr_trend"]] == [2025, 2024, 2023]

    async def test_empty_summary(self, service):
        summary = await service.summary()

        assert summary["current_emr"] is None
        assert summary["emr_trend"] == []
        assert summary["total_paid"] == 0
