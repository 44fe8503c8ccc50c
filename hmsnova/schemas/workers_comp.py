"""Workers' compensation schemas."""


from datetime import date, datetime
from typing import Literal

from pydantic import Field

from hmsnova.schemas.common import CamelModel


class ClaimCreate(CamelModel):
    incident_id: str | None = None
    claim_number: str = Field(min_length=1)
    carrier_name: str = Field(min_length=1)
    claimant_name: str = Field(min_length=1)
    injury_date: date
    reported_date: date
    reserve_amount: float | None = Field(default=None, ge=0)
    adjuster_name: str | None = None
    adjuster_phone: str | None = None
    notes: str | None = None


class ClaimUpdate(CamelModel):
    status: Literal["OPEN", "CLOSED", "DENIED", "LITIGATED"] | None = None
    reserve_amount: float | None = Field(default=None, ge=0)
    paid_amount: float | None = Field(default=None, ge=0)
    lost_work_days: int | None = Field(default=None, ge=0)
    return_to_work_date: date | None = None
    adjuster_name: str | None = None
    adjuster_phone: str | None = None
    notes: str | None = None


class ClaimClose(CamelModel):
    paid_amount: float | None = Field(default=None, ge=0)
    lost_work_days: int | None = Field(default=None, ge=0)
    return_to_work_date: date | None = None
    notes: str | None = None


class ClaimOut(CamelModel):
    id: str
    tenant_id: str
    incident_id: str | None = None
    claim_number: str
    carrier_name: str
    claimant_name: str
    injury_date: date
    reported_date: date
    status: str
    reserve_amount: float | None = None
    paid_amount: float | None = None
    lost_work_days: int | None = None
    return_to_work_date: date | None = None
    adjuster_name: str | None = None
    adjuster_phone: str | None = None
    notes: str | None = None
    closed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class RecordEmr(CamelModel):
    year: int = Field(ge=1900, le=2100)
    emr_value: float = Field(gt=0)
    carrier: str | None = None
    notes: str | None = None


class EmrOut(CamelModel):
    id: str
    year: int
    emr_value: float
    carrier: str | None = None
    notes: str | None = None


class WorkersCompSummary(CamelModel):
    open_claims: int
    total_claims: int
    total_paid: float
    total_lost_days: int
    current_emr: EmrOut | None = None
    emr_trend: list[EmrOut]
