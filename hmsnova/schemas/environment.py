"""Environmental aspect / measurement schemas."""


from datetime import datetime
from typing import Literal

from pydantic import Field

from hmsnova.schemas.common import CamelModel

AspectCategory = Literal[
    "EMISSIONS", "WASTE", "ENERGY", "WATER", "RESOURCE_USE", "BIODIVERSITY", "OTHER"
]
AspectStatus = Literal["ACTIVE", "MONITORED", "CLOSED"]
MonitoringFrequency = Literal["DAILY", "WEEKLY", "MONTHLY", "QUARTERLY", "ANNUALLY"]


class AspectCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str | None = None
    process: str | None = None
    location: str | None = None
    category: AspectCategory
    impact_type: Literal["NEGATIVE", "POSITIVE"] = "NEGATIVE"
    severity: int = Field(ge=1, le=5)
    likelihood: int = Field(ge=1, le=5)
    legal_requirement: str | None = None
    control_measures: str | None = None
    monitoring_method: str | None = None
    monitoring_frequency: MonitoringFrequency | None = None
    owner_id: str | None = None
    goal_id: str | None = None
    status: AspectStatus = "ACTIVE"
    next_review_date: datetime | None = None


class AspectUpdate(CamelModel):
    title: str | None = None
    description: str | None = None
    process: str | None = None
    location: str | None = None
    category: AspectCategory | None = None
    impact_type: Literal["NEGATIVE", "POSITIVE"] | None = None
    severity: int | None = Field(default=None, ge=1, le=5)
    likelihood: int | None = Field(default=None, ge=1, le=5)
    legal_requirement: str | None = None
    control_measures: str | None = None
    monitoring_method: str | None = None
    monitoring_frequency: MonitoringFrequency | None = None
    owner_id: str | None = None
    goal_id: str | None = None
    status: AspectStatus | None = None
    next_review_date: datetime | None = None


class AspectOut(CamelModel):
    id: str
    tenant_id: str
    title: str
    description: str | None = None
    process: str | None = None
    location: str | None = None
    category: str
    impact_type: str
    severity: int
    likelihood: int
    significance_score: int
    legal_requirement: str | None = None
    control_measures: str | None = None
    monitoring_method: str | None = None
    monitoring_frequency: str | None = None
    owner_id: str | None = None
    goal_id: str | None = None
    status: str
    next_review_date: datetime | None = None
    created_at: datetime
    updated_at: datetime


class MeasurementCreate(CamelModel):
    parameter: str = Field(min_length=1)
    unit: str | None = None
    method: str | None = None
    measured_value: float
    limit_value: float | None = None
    target_value: float | None = None
    measurement_date: datetime
    notes: str | None = None
    responsible_id: str | None = None


class MeasurementOut(CamelModel):
    id: str
    aspect_id: str
    parameter: str
    unit: str | None = None
    method: str | None = None
    measured_value: float
    limit_value: float | None = None
    target_value: float | None = None
    measurement_date: datetime
    status: str
    notes: str | None = None
    responsible_id: str | None = None
    created_at: datetime
