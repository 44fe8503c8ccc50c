"""OSHA recordkeeping router — recordable incidents, 300A logs and rates."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.deps import get_tenant_id
from hmsnova.core.response import DataResponse
from hmsnova.db.base import get_db
from hmsnova.schemas.osha import (
    CertifyOshaLog,
    MarkRecordable,
    OshaIncidentOut,
    OshaLogOut,
    PostOsha300A,
    RateRequest,
    RatesOut,
    UpsertOshaLog,
)
from hmsnova.services.osha import OshaService
from hmsnova.services.osha_rates import RateInputs, calculate_rates

router = APIRouter(prefix="/osha", tags=["OSHA"])


def _svc(session: AsyncSession, tenant_id: str) -> OshaService:
    return OshaService(session, tenant_id)


@router.post("/rates", response_model=DataResponse[RatesOut])
async def calculate(body: RateRequest):
    """Compute TRIR/DART/LTIR/severity for ad-hoc figures. Nothing is stored."""
    rates = calculate_rates(RateInputs(**body.model_dump()))
    return {"data": RatesOut.model_validate(rates)}


@router.get("/incidents", response_model=DataResponse[list[OshaIncidentOut]])
async def list_recordable_incidents(
    year: int = Query(..., ge=1971, le=2100),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    incidents = await _svc(session, tenant_id).list_recordable_incidents(year)
    return {"data": [OshaIncidentOut.model_validate(i) for i in incidents]}


@router.put("/incidents/{incident_id}/recordable", response_model=DataResponse[OshaIncidentOut])
async def mark_incident_recordable(
    incident_id: str,
    body: MarkRecordable,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    incident = await _svc(session, tenant_id).mark_incident_recordable(incident_id, body)
    return {"data": OshaIncidentOut.model_validate(incident)}


@router.get("/logs", response_model=DataResponse[list[OshaLogOut]])
async def list_logs(
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    logs = await _svc(session, tenant_id).list_logs()
    return {"data": [OshaLogOut.model_validate(log) for log in logs]}


@router.put("/logs", response_model=DataResponse[OshaLogOut])
async def upsert_log(
    body: UpsertOshaLog,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Recount the year's recordable incidents and recompute the rates."""
    log = await _svc(session, tenant_id).upsert_log(body)
    return {"data": OshaLogOut.model_validate(log)}


@router.get("/logs/{year}", response_model=DataResponse[OshaLogOut])
async def get_log(
    year: int,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    log = await _svc(session, tenant_id).get_log(year)
    return {"data": OshaLogOut.model_validate(log)}


@router.post("/logs/{year}/certify", response_model=DataResponse[OshaLogOut])
async def certify_log(
    year: int,
    body: CertifyOshaLog,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    log = await _svc(session, tenant_id).certify_log(year, body)
    return {"data": OshaLogOut.model_validate(log)}


@router.post("/logs/{year}/post", response_model=DataResponse[OshaLogOut])
async def post_300a_summary(
    year: int,
    body: PostOsha300A,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    log = await _svc(session, tenant_id).post_300a_summary(year, body)
    return {"data": OshaLogOut.model_validate(log)}
