"""Generic async repository with pagination and tenant isolation."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.db.base import Base
from hmsnova.domain.mixins import utcnow

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Generic CRUD repository. All queries are filtered by tenant_id.

    Deletes are hard deletes; callers that need history archive by status
    instead.
    """

    model: type[ModelT]
    default_order_by: str = "created_at"

    def __init__(self, session: AsyncSession, tenant_id: str):
        self._session = session
        self._tenant_id = tenant_id

    @property
    def tenant_id(self) -> str:
        return self._tenant_id

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _base_query(self):
        """Return a SELECT filtered by tenant_id."""
        return select(self.model).where(self.model.tenant_id == self._tenant_id)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get_by_id(self, entity_id: str) -> ModelT | None:
        result = await self._session.execute(
            self._base_query().where(self.model.id == entity_id)
        )
        return result.scalars().first()

    async def list(
        self,
        *,
        offset: int = 0,
        limit: int = 50,
        order_by: str | None = None,
        order: str = "desc",
        filters: dict[str, Any] | None = None,
    ) -> tuple[list[ModelT], int]:
        """Return (items, total_count) with pagination and optional column filters."""
        q = self._base_query()

        # Apply simple equality filters
        if filters:
            for col_name, value in filters.items():
                if value is not None and hasattr(self.model, col_name):
                    q = q.where(getattr(self.model, col_name) == value)

        # Count
        count_q = select(func.count()).select_from(q.subquery())
        total = (await self._session.execute(count_q)).scalar_one()

        # Order + paginate
        col = getattr(self.model, order_by or self.default_order_by, None)
        if col is not None:
            q = q.order_by(col.desc() if order == "desc" else col.asc())
        q = q.offset(offset).limit(limit)

        items = (await self._session.execute(q)).scalars().all()
        return list(items), total

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    async def create(self, **kwargs: Any) -> ModelT:
        instance = self.model(tenant_id=self._tenant_id, **kwargs)
        self._session.add(instance)
        await self._session.flush()  # populate id
        await self._session.refresh(instance)
        return instance

    async def create_many(self, rows: list[dict[str, Any]]) -> int:
        instances = [self.model(tenant_id=self._tenant_id, **row) for row in rows]
        self._session.add_all(instances)
        await self._session.flush()
        return len(instances)

    async def update(self, entity_id: str, **kwargs: Any) -> ModelT | None:
        kwargs.pop("id", None)
        kwargs.pop("tenant_id", None)
        if "updated_at" not in kwargs and hasattr(self.model, "updated_at"):
            kwargs["updated_at"] = utcnow()

        await self._session.execute(
            update(self.model)
            .where(self.model.id == entity_id)
            .where(self.model.tenant_id == self._tenant_id)
            .values(**kwargs)
            .execution_options(synchronize_session="fetch")
        )
        await self._session.flush()
        instance = await self.get_by_id(entity_id)
        if instance is not None:
            await self._session.refresh(instance)
        return instance

    async def delete(self, entity_id: str) -> bool:
        result = await self._session.execute(
            delete(self.model)
            .where(self.model.id == entity_id)
            .where(self.model.tenant_id == self._tenant_id)
            .execution_options(synchronize_session="fetch")
        )
        await self._session.flush()
        return result.rowcount > 0
