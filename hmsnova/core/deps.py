"""Shared FastAPI dependencies: tenant scoping and cron authentication."""

import secrets

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.config import settings
from hmsnova.core.exceptions import ForbiddenError, NotFoundError, UnauthorizedError
from hmsnova.db.base import get_db
from hmsnova.repositories.tenant import TenantRepository

TENANT_HEADER = "X-Tenant-ID"


async def get_tenant_id(
    x_tenant_id: str | None = Header(default=None, alias=TENANT_HEADER),
    session: AsyncSession = Depends(get_db),
) -> str:
    """Tenant the request is scoped to; falls back to ``DEFAULT_TENANT_ID``.

    The tenant must exist and be ``ACTIVE``; suspended and cancelled tenants
    are refused with 403.
    """
    tenant_id = (x_tenant_id or "").strip() or settings.default_tenant_id
    tenant = await TenantRepository(session).get_by_id(tenant_id)
    if tenant is None:
        raise NotFoundError("Tenant", tenant_id)
    if tenant.status != "ACTIVE":
        raise ForbiddenError(f"Tenant '{tenant_id}' is {tenant.status.lower()}")
    return tenant.id


async def require_cron_secret(
    authorization: str | None = Header(default=None),
) -> None:
    """Guard for endpoints invoked by the platform scheduler.

    Expects ``Authorization: Bearer <CRON_SECRET>``. With no secret configured
    every call is rejected.
    """
    expected = settings.cron_secret
    if not expected or not authorization:
        raise UnauthorizedError("Invalid cron credentials")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not secrets.compare_digest(token.strip(), expected):
        raise UnauthorizedError("Invalid cron credentials")
