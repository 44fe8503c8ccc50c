"""Chemical inventory repository."""

from __future__ import annotations

from hmsnova.domain.chemical import Chemical
from hmsnova.repositories.base import BaseRepository


class ChemicalRepository(BaseRepository[Chemical]):
    model = Chemical
    default_order_by = "product_name"

    async def list_active(self) -> list[Chemical]:
        result = await self._session.execute(
            self._base_query()
            .where(Chemical.status == "ACTIVE")
            .order_by(Chemical.product_name.asc())
        )
        return list(result.scalars().all())
