"""OSHA recordkeeping schemas."""


from datetime import datetime
from typing import Literal

from pydantic import Field

from hmsnova.schemas.common import CamelModel

OshaClassification = Literal[
    "FATALITY", "DAYS_AWAY", "RESTRICTED_WORK", "JOB_TRANSFER", "OTHER_RECORDABLE"
]
OshaEventType = Literal["INJURY", "ILLNESS"]
OshaIllnessType = Literal[
    "SKIN_DISORDER", "RESPIRATORY_CONDITION", "POISONING", "HEARING_LOSS", "ALL_OTHER_ILLNESSES"
]


class MarkRecordable(CamelModel):
    osha_recordable: bool
    osha_classification: OshaClassification | None = None
    days_away_from_work: int | None = Field(default=None, ge=0)
    days_on_restriction: int | None = Field(default=None, ge=0)
    days_on_transfer: int | None = Field(default=None, ge=0)
    body_part_affected: str | None = None
    nature_of_injury: str | None = None
    event_type: OshaEventType | None = None
    illness_type: OshaIllnessType | None = None
    privacy_case_flag: bool = False
    osha_300_log_year: int | None = Field(default=None, ge=1971, le=2100)


class UpsertOshaLog(CamelModel):
    year: int = Field(ge=1971, le=2100)
    total_hours_worked: float = Field(ge=0)
    avg_employee_count: int = Field(ge=0)


class CertifyOshaLog(CamelModel):
    certified_by: str = Field(min_length=1)
    certified_title: str = Field(min_length=1)


class PostOsha300A(CamelModel):
    posted_by: str = Field(min_length=1)


class RateRequest(CamelModel):
    """Ad-hoc rate calculation (no persistence)."""

    total_recordable_cases: int = Field(ge=0)
    total_hours_worked: float = Field(ge=0)
    days_away_restricted_transfer_cases: int = Field(default=0, ge=0)
    lost_time_cases: int = Field(default=0, ge=0)
    total_lost_work_days: int = Field(default=0, ge=0)
    average_employees: float = Field(default=0, ge=0)


class RatesOut(CamelModel):
    trir: float | None = None
    dart_rate: float | None = None
    ltir: float | None = None
    severity_rate: float | None = None


class OshaIncidentOut(CamelModel):
    id: str
    title: str
    occurred_at: datetime
    employee_name: str | None = None
    osha_recordable: bool
    osha_classification: str | None = None
    event_type: str | None = None
    illness_type: str | None = None
    days_away_from_work: int | None = None
    days_on_restriction: int | None = None
    days_on_transfer: int | None = None
    body_part_affected: str | None = None
    nature_of_injury: str | None = None
    privacy_case_flag: bool
    osha_300_log_year: int | None = None
    osha_301_completed_at: datetime | None = None


class OshaLogOut(CamelModel):
    id: str
    tenant_id: str
    year: int
    total_hours_worked: float
    avg_employee_count: int
    total_deaths: int
    total_days_away: int
    total_restricted: int
    total_transfer: int
    total_other_recordable: int
    total_injuries: int
    total_skin_disorders: int
    total_respiratory_conditions: int
    total_poisonings: int
    total_hearing_loss: int
    total_other_illnesses: int
    trir: float | None = None
    dart_rate: float | None = None
    ltir: float | None = None
    severity_rate: float | None = None
    certified_at: datetime | None = None
    certified_by: str | None = None
    certified_title: str | None = None
    posted_at: datetime | None = None
    posted_by: str | None = None
    created_at: datetime
    updated_at: datetime
