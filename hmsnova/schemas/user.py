"""User notification preference schemas."""


from pydantic import Field

from hmsnova.schemas.common import CamelModel


class NotificationSettings(CamelModel):
    id: str
    email: str
    phone: str | None = None
    notify_by_email: bool
    notify_by_sms: bool
    reminder_days_before: int
    notify_meetings: bool
    notify_inspections: bool
    notify_audits: bool
    notify_measures: bool


class NotificationSettingsUpdate(CamelModel):
    """Partial update; omitted fields keep their stored value."""

    phone: str | None = None
    notify_by_email: bool | None = None
    notify_by_sms: bool | None = None
    reminder_days_before: int | None = Field(default=None, ge=0, le=30)
    notify_meetings: bool | None = None
    notify_inspections: bool | None = None
    notify_audits: bool | None = None
    notify_measures: bool | None = None
