"""Chemical inventory (stoffkartotek) service.

The SDS inbox flow lives in ``sds_inbox.py``; both it and the manual upload
endpoint write parsed sheets through :meth:`ChemicalService.apply_sds`.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.exceptions import NotFoundError
from hmsnova.core.pagination import PaginationParams
from hmsnova.domain.chemical import Chemical
from hmsnova.domain.mixins import utcnow
from hmsnova.repositories.chemical import ChemicalRepository
from hmsnova.schemas.chemical import ChemicalCreate, ChemicalUpdate
from hmsnova.services.sds_parser import SDSExtraction, suggest_ppe

logger = logging.getLogger(__name__)

# ISO 7010 mandatory-action signs used by the inventory UI
PPE_ICONS = {
    "eye": "ISO_7010_M004.svg.png",
    "hand": "ISO_7010_M009.svg.png",
    "respiratory": "ISO_7010_M017.svg.png",
    "skin": "ISO_7010_M010.svg.png",
}


class ChemicalService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = ChemicalRepository(session, tenant_id)

    async def list_chemicals(
        self, pagination: PaginationParams, status: str | None = None
    ) -> tuple[list[Chemical], int]:
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"status": status},
        )

    async def get_chemical(self, chemical_id: str) -> Chemical:
        chemical = await self._repo.get_by_id(chemical_id)
        if not chemical:
            raise NotFoundError("Chemical", chemical_id)
        return chemical

    async def create_chemical(self, data: ChemicalCreate) -> Chemical:
        chemical = await self._repo.create(**data.model_dump())
        logger.info("Chemical created: %s (%s)", chemical.id, chemical.product_name)
        return chemical

    async def update_chemical(self, chemical_id: str, data: ChemicalUpdate) -> Chemical:
        await self.get_chemical(chemical_id)
        updated = await self._repo.update(chemical_id, **data.model_dump(exclude_unset=True))
        return updated  # type: ignore[return-value]

    async def archive_chemical(self, chemical_id: str) -> Chemical:
        await self.get_chemical(chemical_id)
        archived = await self._repo.update(chemical_id, status="ARCHIVED")
        logger.info("Chemical archived: %s", chemical_id)
        return archived  # type: ignore[return-value]

    async def apply_sds(
        self,
        chemical_id: str,
        extraction: SDSExtraction,
        *,
        file_name: str,
        source: str,
        received_at: datetime | None = None,
    ) -> Chemical:
        """Write parsed SDS fields onto the chemical. Unknown fields keep their value."""
        chemical = await self.get_chemical(chemical_id)

        values: dict = {
            "sds_file_name": file_name,
            "sds_source": source,
            "sds_date": (
                datetime.combine(extraction.sds_date, time(), tzinfo=timezone.utc)
                if extraction.sds_date
                else received_at or utcnow()
            ),
            "contains_isocyanates": extraction.contains_isocyanates,
            "isocyanate_details": extraction.isocyanate_details,
        }
        if extraction.hazard_statements:
            values["hazard_statements"] = "\n".join(extraction.hazard_statements)
        if extraction.signal_word:
            values["signal_word"] = extraction.signal_word
        if extraction.warning_pictograms:
            values["warning_pictograms"] = extraction.warning_pictograms
        if extraction.required_ppe:
            values["required_ppe"] = extraction.required_ppe
        elif extraction.hazard_statements:
            flags = suggest_ppe(extraction.hazard_statements)
            values["required_ppe"] = [PPE_ICONS[kind] for kind, needed in flags.items() if needed]
        if extraction.cas_number and not chemical.cas_number:
            values["cas_number"] = extraction.cas_number

        updated = await self._repo.update(chemical_id, **values)
        logger.info("Applied SDS %s (%s) to chemical %s", file_name, source, chemical_id)
        return updated  # type: ignore[return-value]
