"""Meetings, inspections, audits and measures.

All four share one shape (list, create, get, delete), so the routers are
built from a single factory. Deleting an activity cancels its pending
reminders.
"""


from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.deps import get_tenant_id
from hmsnova.core.pagination import PaginationParams
from hmsnova.core.response import DataResponse, ListResponse, paginated
from hmsnova.db.base import get_db
from hmsnova.schemas.events import (
    AuditCreate,
    AuditOut,
    InspectionCreate,
    InspectionOut,
    MeasureCreate,
    MeasureOut,
    MeetingCreate,
    MeetingOut,
)
from hmsnova.services.events import (
    ActivityService,
    AuditService,
    InspectionService,
    MeasureService,
    MeetingService,
)


def _build_router(
    prefix: str,
    tag: str,
    service_cls: type[ActivityService],
    create_schema: type[BaseModel],
    out_schema: type[BaseModel],
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.get("", response_model=ListResponse[out_schema])  # type: ignore[valid-type]
    async def list_items(
        filter_status: Optional[str] = Query(default=None, alias="status"),
        pagination: PaginationParams = Depends(),
        session: AsyncSession = Depends(get_db),
        tenant_id: str = Depends(get_tenant_id),
    ):
        items, total = await service_cls(session, tenant_id).list(pagination, status=filter_status)
        return paginated([out_schema.model_validate(i) for i in items], total, pagination)

    @router.post(
        "",
        response_model=DataResponse[out_schema],  # type: ignore[valid-type]
        status_code=status.HTTP_201_CREATED,
    )
    async def create_item(
        body: create_schema,  # type: ignore[valid-type]
        session: AsyncSession = Depends(get_db),
        tenant_id: str = Depends(get_tenant_id),
    ):
        item = await service_cls(session, tenant_id).create(body)
        return {"data": out_schema.model_validate(item)}

    @router.get("/{item_id}", response_model=DataResponse[out_schema])  # type: ignore[valid-type]
    async def get_item(
        item_id: str,
        session: AsyncSession = Depends(get_db),
        tenant_id: str = Depends(get_tenant_id),
    ):
        item = await service_cls(session, tenant_id).get(item_id)
        return {"data": out_schema.model_validate(item)}

    @router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_item(
        item_id: str,
        session: AsyncSession = Depends(get_db),
        tenant_id: str = Depends(get_tenant_id),
    ):
        await service_cls(session, tenant_id).delete(item_id)

    return router


meetings_router = _build_router("/meetings", "Meetings", MeetingService, MeetingCreate, MeetingOut)
inspections_router = _build_router(
    "/inspections", "Inspections", InspectionService, InspectionCreate, InspectionOut
)
audits_router = _build_router("/audits", "Audits", AuditService, AuditCreate, AuditOut)
measures_router = _build_router("/measures", "Measures", MeasureService, MeasureCreate, MeasureOut)
