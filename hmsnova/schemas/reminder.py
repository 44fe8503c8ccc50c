"""Reminder schemas."""


from datetime import datetime
from typing import Literal

from pydantic import Field

from hmsnova.schemas.common import CamelModel

ReminderEntityType = Literal["Meeting", "Inspection", "Audit", "Measure"]


class CreateReminders(CamelModel):
    entity_type: ReminderEntityType
    entity_id: str
    user_ids: list[str] = Field(min_length=1)
    scheduled_date: datetime
    title: str = Field(min_length=1)
    description: str | None = None


class CreateRemindersResult(CamelModel):
    created: int


class CancelRemindersResult(CamelModel):
    cancelled: int


class DispatchResult(CamelModel):
    sent: int
    failed: int


class ReminderOut(CamelModel):
    id: str
    user_id: str | None = None
    type: str
    entity_type: str
    entity_id: str
    title: str
    message: str | None = None
    scheduled_for: datetime
    status: str
    sent_at: datetime | None = None
    sent_via_email: bool
    sent_via_sms: bool
    error: str | None = None
