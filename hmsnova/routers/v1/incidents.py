"""Incident router — registration, investigation, closure and stats."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.deps import get_tenant_id
from hmsnova.core.pagination import PaginationParams
from hmsnova.core.response import DataResponse, ListResponse, paginated
from hmsnova.db.base import get_db
from hmsnova.schemas.incident import (
    IncidentClose,
    IncidentCreate,
    IncidentInvestigate,
    IncidentOut,
    IncidentStats,
    IncidentUpdate,
)
from hmsnova.services.incidents import IncidentService

router = APIRouter(prefix="/incidents", tags=["Incidents"])


def _svc(session: AsyncSession, tenant_id: str) -> IncidentService:
    return IncidentService(session, tenant_id)


@router.get("/stats", response_model=DataResponse[IncidentStats])
async def get_stats(
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    return {"data": IncidentStats(**await _svc(session, tenant_id).stats())}


@router.get("", response_model=ListResponse[IncidentOut])
async def list_incidents(
    filter_status: Optional[str] = Query(default=None, alias="status"),
    incident_type: Optional[str] = Query(default=None, alias="incidentType"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_incidents(
        pagination, status=filter_status, incident_type=incident_type
    )
    return paginated([IncidentOut.model_validate(i) for i in items], total, pagination)


@router.post("", response_model=DataResponse[IncidentOut], status_code=status.HTTP_201_CREATED)
async def create_incident(
    body: IncidentCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    incident = await _svc(session, tenant_id).create_incident(body)
    return {"data": IncidentOut.model_validate(incident)}


@router.get("/{incident_id}", response_model=DataResponse[IncidentOut])
async def get_incident(
    incident_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    incident = await _svc(session, tenant_id).get_incident(incident_id)
    return {"data": IncidentOut.model_validate(incident)}


@router.put("/{incident_id}", response_model=DataResponse[IncidentOut])
async def update_incident(
    incident_id: str,
    body: IncidentUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    incident = await _svc(session, tenant_id).update_incident(incident_id, body)
    return {"data": IncidentOut.model_validate(incident)}


@router.post("/{incident_id}/investigate", response_model=DataResponse[IncidentOut])
async def investigate_incident(
    incident_id: str,
    body: IncidentInvestigate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    incident = await _svc(session, tenant_id).investigate_incident(incident_id, body)
    return {"data": IncidentOut.model_validate(incident)}


@router.post("/{incident_id}/close", response_model=DataResponse[IncidentOut])
async def close_incident(
    incident_id: str,
    body: IncidentClose,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    incident = await _svc(session, tenant_id).close_incident(incident_id, body)
    return {"data": IncidentOut.model_validate(incident)}


@router.delete("/{incident_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_incident(
    incident_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_incident(incident_id)
