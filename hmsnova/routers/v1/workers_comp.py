"""Workers' compensation router — claims, EMR history and the dashboard summary."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.deps import get_tenant_id
from hmsnova.core.pagination import PaginationParams
from hmsnova.core.response import DataResponse, ListResponse, paginated
from hmsnova.db.base import get_db
from hmsnova.schemas.workers_comp import (
    ClaimClose,
    ClaimCreate,
    ClaimOut,
    ClaimUpdate,
    EmrOut,
    RecordEmr,
    WorkersCompSummary,
)
from hmsnova.services.workers_comp import WorkersCompService

router = APIRouter(prefix="/workers-comp", tags=["Workers' Compensation"])


def _svc(session: AsyncSession, tenant_id: str) -> WorkersCompService:
    return WorkersCompService(session, tenant_id)


@router.get("/summary", response_model=DataResponse[WorkersCompSummary])
async def get_summary(
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    summary = await _svc(session, tenant_id).summary()
    current = summary["current_emr"]
    return {
        "data": WorkersCompSummary(
            open_claims=summary["open_claims"],
            total_claims=summary["total_claims"],
            total_paid=summary["total_paid"],
            total_lost_days=summary["total_lost_days"],
            current_emr=EmrOut.model_validate(current) if current else None,
            emr_trend=[EmrOut.model_validate(r) for r in summary["emr_trend"]],
        )
    }


@router.get("/emr", response_model=DataResponse[list[EmrOut]])
async def list_emr(
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    rows = await _svc(session, tenant_id).list_emr()
    return {"data": [EmrOut.model_validate(r) for r in rows]}


@router.put("/emr", response_model=DataResponse[EmrOut])
async def record_emr(
    body: RecordEmr,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    row = await _svc(session, tenant_id).record_emr(body)
    return {"data": EmrOut.model_validate(row)}


@router.get("/claims", response_model=ListResponse[ClaimOut])
async def list_claims(
    filter_status: Optional[str] = Query(default=None, alias="status"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_claims(pagination, status=filter_status)
    return paginated([ClaimOut.model_validate(c) for c in items], total, pagination)


@router.post("/claims", response_model=DataResponse[ClaimOut], status_code=status.HTTP_201_CREATED)
async def create_claim(
    body: ClaimCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    claim = await _svc(session, tenant_id).create_claim(body)
    return {"data": ClaimOut.model_validate(claim)}


@router.get("/claims/{claim_id}", response_model=DataResponse[ClaimOut])
async def get_claim(
    claim_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    claim = await _svc(session, tenant_id).get_claim(claim_id)
    return {"data": ClaimOut.model_validate(claim)}


@router.put("/claims/{claim_id}", response_model=DataResponse[ClaimOut])
async def update_claim(
    claim_id: str,
    body: ClaimUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    claim = await _svc(session, tenant_id).update_claim(claim_id, body)
    return {"data": ClaimOut.model_validate(claim)}


@router.post("/claims/{claim_id}/close", response_model=DataResponse[ClaimOut])
async def close_claim(
    claim_id: str,
    body: ClaimClose,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    claim = await _svc(session, tenant_id).close_claim(claim_id, body)
    return {"data": ClaimOut.model_validate(claim)}
