"""Domain package — all ORM models are imported here so Alembic autogenerate detects them.

Folder intent:
  tenant.py        — Tenant, User (with notification preferences), UserTenant membership
  events.py        — Meeting, Inspection, Audit, Measure (reminder-bearing activities)
  reminder.py      — ScheduledReminder (delayed-send email/SMS reminders)
  incident.py      — Incident with OSHA fields, OshaLog (300A summary per year)
  chemical.py      — Chemical inventory with SDS fields
  environment.py   — EnvironmentalAspect, EnvironmentalMeasurement (ISO 14001)
  workers_comp.py  — WorkersCompClaim, EmrHistory
  audit.py         — Immutable audit log (never updated or deleted)
  mixins.py        — Shared IdMixin, TimestampMixin, TenantMixin
"""

from hmsnova.domain.audit import AuditLog
from hmsnova.domain.chemical import Chemical
from hmsnova.domain.environment import EnvironmentalAspect, EnvironmentalMeasurement
from hmsnova.domain.events import Audit, Inspection, Measure, Meeting
from hmsnova.domain.incident import Incident, OshaLog
from hmsnova.domain.reminder import ScheduledReminder
from hmsnova.domain.tenant import Tenant, User, UserTenant
from hmsnova.domain.workers_comp import EmrHistory, WorkersCompClaim

__all__ = [
    "Audit",
    "AuditLog",
    "Chemical",
    "EmrHistory",
    "EnvironmentalAspect",
    "EnvironmentalMeasurement",
    "Incident",
    "Inspection",
    "Measure",
    "Meeting",
    "OshaLog",
    "ScheduledReminder",
    "Tenant",
    "User",
    "UserTenant",
    "WorkersCompClaim",
]
