"""Environmental aspects (ISO 14001) router."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.deps import get_tenant_id
from hmsnova.core.pagination import PaginationParams
from hmsnova.core.response import DataResponse, ListResponse, paginated
from hmsnova.db.base import get_db
from hmsnova.schemas.environment import (
    AspectCreate,
    AspectOut,
    AspectUpdate,
    MeasurementCreate,
    MeasurementOut,
)
from hmsnova.services.environment import EnvironmentService

router = APIRouter(prefix="/environment", tags=["Environment"])


def _svc(session: AsyncSession, tenant_id: str) -> EnvironmentService:
    return EnvironmentService(session, tenant_id)


@router.get("/aspects", response_model=ListResponse[AspectOut])
async def list_aspects(
    filter_status: Optional[str] = Query(default=None, alias="status"),
    category: Optional[str] = Query(default=None),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """List aspects, most significant first unless ``sort`` says otherwise."""
    items, total = await _svc(session, tenant_id).list_aspects(
        pagination, status=filter_status, category=category
    )
    return paginated([AspectOut.model_validate(a) for a in items], total, pagination)


@router.post("/aspects", response_model=DataResponse[AspectOut], status_code=status.HTTP_201_CREATED)
async def create_aspect(
    body: AspectCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    aspect = await _svc(session, tenant_id).create_aspect(body)
    return {"data": AspectOut.model_validate(aspect)}


@router.get("/aspects/{aspect_id}", response_model=DataResponse[AspectOut])
async def get_aspect(
    aspect_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    aspect = await _svc(session, tenant_id).get_aspect(aspect_id)
    return {"data": AspectOut.model_validate(aspect)}


@router.put("/aspects/{aspect_id}", response_model=DataResponse[AspectOut])
async def update_aspect(
    aspect_id: str,
    body: AspectUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    aspect = await _svc(session, tenant_id).update_aspect(aspect_id, body)
    return {"data": AspectOut.model_validate(aspect)}


@router.delete("/aspects/{aspect_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_aspect(
    aspect_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_aspect(aspect_id)


@router.get("/aspects/{aspect_id}/measurements", response_model=DataResponse[list[MeasurementOut]])
async def list_measurements(
    aspect_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items = await _svc(session, tenant_id).list_measurements(aspect_id)
    return {"data": [MeasurementOut.model_validate(m) for m in items]}


@router.post(
    "/aspects/{aspect_id}/measurements",
    response_model=DataResponse[MeasurementOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_measurement(
    aspect_id: str,
    body: MeasurementCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    measurement = await _svc(session, tenant_id).create_measurement(aspect_id, body)
    return {"data": MeasurementOut.model_validate(measurement)}
