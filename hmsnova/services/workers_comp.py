"""Workers' compensation claims and experience modification rate (EMR) history."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.exceptions import ConflictError, NotFoundError
from hmsnova.core.pagination import PaginationParams
from hmsnova.domain.mixins import utcnow
from hmsnova.domain.workers_comp import EmrHistory, WorkersCompClaim
from hmsnova.repositories.workers_comp import EmrHistoryRepository, WorkersCompClaimRepository
from hmsnova.schemas.workers_comp import ClaimClose, ClaimCreate, ClaimUpdate, RecordEmr

logger = logging.getLogger(__name__)

EMR_TREND_YEARS = 3


class WorkersCompService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._claims = WorkersCompClaimRepository(session, tenant_id)
        self._emr = EmrHistoryRepository(session, tenant_id)

    # ── Claims ────────────────────────────────────────────────────────────

    async def list_claims(
        self, pagination: PaginationParams, status: str | None = None
    ) -> tuple[list[WorkersCompClaim], int]:
        return await self._claims.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"status": status},
        )

    async def get_claim(self, claim_id: str) -> WorkersCompClaim:
        claim = await self._claims.get_by_id(claim_id)
        if not claim:
            raise NotFoundError("WorkersCompClaim", claim_id)
        return claim

    async def create_claim(self, data: ClaimCreate) -> WorkersCompClaim:
        claim = await self._claims.create(**data.model_dump(), status="OPEN")
        logger.info("Workers' comp claim created: %s (%s)", claim.id, claim.claim_number)
        return claim

    async def update_claim(self, claim_id: str, data: ClaimUpdate) -> WorkersCompClaim:
        claim = await self.get_claim(claim_id)
        values = data.model_dump(exclude_unset=True)
        if values.get("status") == "CLOSED" and claim.closed_at is None:
            values["closed_at"] = utcnow()
        updated = await self._claims.update(claim_id, **values)
        return updated  # type: ignore[return-value]

    async def close_claim(self, claim_id: str, data: ClaimClose) -> WorkersCompClaim:
        claim = await self.get_claim(claim_id)
        if claim.status == "CLOSED":
            raise ConflictError(f"Claim '{claim.claim_number}' is already closed")
        values = data.model_dump(exclude_none=True)
        updated = await self._claims.update(claim_id, status="CLOSED", closed_at=utcnow(), **values)
        logger.info("Workers' comp claim closed: %s", claim_id)
        return updated  # type: ignore[return-value]

    # ── EMR ───────────────────────────────────────────────────────────────

    async def record_emr(self, data: RecordEmr) -> EmrHistory:
        """Create or replace the EMR value for ``data.year``."""
        existing = await self._emr.get_by_year(data.year)
        if existing:
            updated = await self._emr.update(
                existing.id, emr_value=data.emr_value, carrier=data.carrier, notes=data.notes
            )
            return updated  # type: ignore[return-value]
        return await self._emr.create(**data.model_dump())

    async def list_emr(self) -> list[EmrHistory]:
        return await self._emr.list_recent()

    # ── Summary ───────────────────────────────────────────────────────────

    async def summary(self) -> dict:
        claims = await self._claims.list_all()
        trend = await self._emr.list_recent(EMR_TREND_YEARS)
        return {
            "open_claims": sum(1 for c in claims if c.status == "OPEN"),
            "total_claims": len(claims),
            "total_paid": sum(c.paid_amount or 0.0 for c in claims),
            "total_lost_days": sum(c.lost_work_days or 0 for c in claims),
            "current_emr": trend[0] if trend else None,
            "emr_trend": trend,
        }
