"""Schemas for meetings, inspections, audits and measures."""


from datetime import datetime

from pydantic import Field

from hmsnova.schemas.common import CamelModel


class _ParticipantsMixin(CamelModel):
    # Users to remind ahead of the activity
    participant_ids: list[str] = Field(default_factory=list)


class MeetingCreate(_ParticipantsMixin):
    title: str = Field(min_length=1)
    meeting_type: str = "OTHER"
    scheduled_date: datetime
    location: str | None = None
    meeting_link: str | None = None
    agenda: str | None = None


class MeetingOut(CamelModel):
    id: str
    tenant_id: str
    title: str
    meeting_type: str
    scheduled_date: datetime
    location: str | None = None
    meeting_link: str | None = None
    agenda: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime


class InspectionCreate(_ParticipantsMixin):
    title: str = Field(min_length=1)
    inspection_type: str = "VERNERUNDE"
    scheduled_date: datetime
    location: str | None = None
    description: str | None = None


class InspectionOut(CamelModel):
    id: str
    tenant_id: str
    title: str
    inspection_type: str
    scheduled_date: datetime
    location: str | None = None
    description: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime


class AuditCreate(_ParticipantsMixin):
    title: str = Field(min_length=1)
    audit_type: str = "INTERNAL"
    scheduled_date: datetime
    area: str = Field(min_length=1)
    scope: str | None = None


class AuditOut(CamelModel):
    id: str
    tenant_id: str
    title: str
    audit_type: str
    scheduled_date: datetime
    area: str
    scope: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime


class MeasureCreate(_ParticipantsMixin):
    title: str = Field(min_length=1)
    description: str | None = None
    due_at: datetime
    responsible_id: str | None = None
    incident_id: str | None = None


class MeasureOut(CamelModel):
    id: str
    tenant_id: str
    title: str
    description: str | None = None
    due_at: datetime
    responsible_id: str | None = None
    incident_id: str | None = None
    status: str
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
