"""Incident (avvik) schemas."""


from datetime import datetime
from typing import Literal

from pydantic import Field

from hmsnova.schemas.common import CamelModel

IncidentType = Literal["AVVIK", "NESTEN", "SKADE", "MILJO", "KVALITET"]
IncidentStatus = Literal["OPEN", "INVESTIGATING", "ACTION_TAKEN", "CLOSED"]


class IncidentCreate(CamelModel):
    incident_type: IncidentType
    title: str = Field(min_length=3)
    description: str = Field(min_length=10)
    severity: int = Field(ge=1, le=5)
    occurred_at: datetime
    reported_by: str = Field(min_length=1)
    location: str | None = None
    employee_name: str | None = None
    witness_name: str | None = None
    immediate_action: str | None = None


class IncidentUpdate(CamelModel):
    incident_type: IncidentType | None = None
    title: str | None = Field(default=None, min_length=3)
    description: str | None = None
    severity: int | None = Field(default=None, ge=1, le=5)
    occurred_at: datetime | None = None
    location: str | None = None
    employee_name: str | None = None
    witness_name: str | None = None
    immediate_action: str | None = None
    status: IncidentStatus | None = None


class IncidentInvestigate(CamelModel):
    root_cause: str = Field(min_length=10)
    contributing_factors: str | None = None
    investigated_by: str = Field(min_length=1)


class IncidentClose(CamelModel):
    closed_by: str = Field(min_length=1)
    effectiveness_review: str = Field(min_length=10)
    lessons_learned: str | None = None


class IncidentOut(CamelModel):
    id: str
    tenant_id: str
    incident_type: str
    title: str
    description: str | None = None
    severity: int
    occurred_at: datetime
    reported_by: str
    location: str | None = None
    employee_name: str | None = None
    witness_name: str | None = None
    immediate_action: str | None = None
    status: str
    root_cause: str | None = None
    contributing_factors: str | None = None
    investigated_by: str | None = None
    investigated_at: datetime | None = None
    closed_by: str | None = None
    closed_at: datetime | None = None
    effectiveness_review: str | None = None
    lessons_learned: str | None = None
    osha_recordable: bool
    osha_300_log_year: int | None = None
    created_at: datetime
    updated_at: datetime


class IncidentStats(CamelModel):
    total: int
    by_status: dict[str, int]
    by_type: dict[str, int]
    by_severity: dict[str, int]
