"""Tenant and user repositories.

Users are not tenant-owned rows, so these do not extend BaseRepository;
membership is resolved through ``user_tenants``.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.domain.tenant import Tenant, User, UserTenant


class TenantRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, tenant_id: str) -> Tenant | None:
        return await self._session.get(Tenant, tenant_id)


class UserRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, user_id: str) -> User | None:
        return await self._session.get(User, user_id)

    async def get_tenant_member(self, tenant_id: str, user_id: str) -> User | None:
        members = await self.list_tenant_members(tenant_id, [user_id])
        return members[0] if members else None

    async def list_tenant_members(self, tenant_id: str, user_ids: list[str]) -> list[User]:
        """Users from ``user_ids`` that belong to ``tenant_id``."""
        if not user_ids:
            return []
        result = await self._session.execute(
            select(User)
            .join(UserTenant, UserTenant.user_id == User.id)
            .where(UserTenant.tenant_id == tenant_id)
            .where(User.id.in_(user_ids))
        )
        return list(result.scalars().unique().all())
