"""Reminder fan-out, cancellation and dispatch.

Fan-out turns one upcoming activity (meeting, inspection, audit, measure) into
one PENDING ``ScheduledReminder`` per interested user. Dispatch is a batch
job triggered by the platform cron: it walks every due reminder across all
tenants, sends email and/or SMS, and records the outcome per reminder.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from hmsnova.core.exceptions import ValidationError
from hmsnova.domain.mixins import as_utc, utcnow
from hmsnova.domain.reminder import ScheduledReminder
from hmsnova.domain.tenant import User
from hmsnova.repositories.events import (
    AuditRepository,
    InspectionRepository,
    MeasureRepository,
    MeetingRepository,
)
from hmsnova.repositories.reminder import ScheduledReminderRepository, list_due_reminders
from hmsnova.repositories.tenant import UserRepository
from hmsnova.services.mailer import EmailSender, get_email_sender
from hmsnova.services.sms import SmsSender, get_sms_sender

logger = logging.getLogger(__name__)

# entity type -> (user preference flag, reminder type)
REMINDER_CATEGORIES: dict[str, tuple[str, str]] = {
    "Meeting": ("notify_meetings", "MEETING_UPCOMING"),
    "Inspection": ("notify_inspections", "INSPECTION_UPCOMING"),
    "Audit": ("notify_audits", "AUDIT_UPCOMING"),
    "Measure": ("notify_measures", "MEASURE_DUE_SOON"),
}

_ENTITY_REPOSITORIES = {
    "Meeting": MeetingRepository,
    "Inspection": InspectionRepository,
    "Audit": AuditRepository,
    "Measure": MeasureRepository,
}

DEFAULT_REMINDER_DAYS = 1


# ---------------------------------------------------------------------------
# Fan-out rules
# ---------------------------------------------------------------------------

def start_of_day(value: datetime) -> datetime:
    return as_utc(value).replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(value: datetime) -> datetime:
    return as_utc(value).replace(hour=23, minute=59, second=59, microsecond=999999)


def reminder_send_time(event_date: datetime, days_before: int | None) -> datetime:
    """Midnight UTC of the event day, moved back by the user's lead time."""
    days = DEFAULT_REMINDER_DAYS if days_before is None else days_before
    return start_of_day(event_date) - timedelta(days=days)


def wants_reminder(user: User, entity_type: str) -> bool:
    """True when the user's category flag and at least one channel are on."""
    flag, _ = REMINDER_CATEGORIES[entity_type]
    if getattr(user, flag) is False:
        return False
    return bool(user.notify_by_email or user.notify_by_sms)


class ReminderService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._tenant_id = tenant_id
        self._reminders = ScheduledReminderRepository(session, tenant_id)
        self._users = UserRepository(session)

    async def create_reminders(
        self,
        *,
        entity_type: str,
        entity_id: str,
        user_ids: list[str],
        scheduled_date: datetime,
        title: str,
        description: str | None = None,
        now: datetime | None = None,
    ) -> int:
        """Create PENDING reminders for eligible users; returns how many were created.

        Calling this again for the same entity never duplicates a reminder a
        user already holds in PENDING or SENT state.
        """
        if entity_type not in REMINDER_CATEGORIES:
            raise ValidationError(f"Unsupported reminder entity type '{entity_type}'")
        now = as_utc(now or utcnow())
        _, reminder_type = REMINDER_CATEGORIES[entity_type]

        users = await self._users.list_tenant_members(self._tenant_id, list(dict.fromkeys(user_ids)))
        already = await self._reminders.users_with_active_reminder(
            entity_type, entity_id, [u.id for u in users]
        )

        rows: list[dict[str, Any]] = []
        for user in users:
            if not wants_reminder(user, entity_type):
                continue
            send_at = reminder_send_time(scheduled_date, user.reminder_days_before)
            if send_at < now:
                continue
            if user.id in already:
                continue
            rows.append(
                {
                    "user_id": user.id,
                    "type": reminder_type,
                    "entity_type": entity_type,
                    "entity_id": entity_id,
                    "title": title,
                    "message": description,
                    "scheduled_for": send_at,
                    "status": "PENDING",
                }
            )

        if rows:
            await self._reminders.create_many(rows)
        logger.info(
            "Reminders for %s %s: %d created (%d candidates)",
            entity_type, entity_id, len(rows), len(users),
        )
        return len(rows)

    async def cancel_reminders(self, entity_type: str, entity_id: str) -> int:
        cancelled = await self._reminders.cancel_pending(entity_type, entity_id)
        if cancelled:
            logger.info("Cancelled %d reminder(s) for %s %s", cancelled, entity_type, entity_id)
        return cancelled

    async def list_for_entity(self, entity_type: str, entity_id: str) -> list[ScheduledReminder]:
        return await self._reminders.list_for_entity(entity_type, entity_id)


# ---------------------------------------------------------------------------
# Message templates (Norwegian, as shown to end users)
# ---------------------------------------------------------------------------

def _fmt(value: datetime | None) -> str:
    return as_utc(value).strftime("%d.%m.%Y %H:%M") if value else "-"


def build_email(reminder_type: str, entity: Any) -> tuple[str, str]:
    """Return ``(subject, plain text)`` for a reminder email."""
    title = entity.title
    if reminder_type == "MEETING_UPCOMING":
        subject = f"Påminnelse: {title}"
        body = (
            f"Du har et møte planlagt: {title}\n\n"
            f"Tidspunkt: {_fmt(entity.scheduled_date)}\n"
            f"Sted: {entity.location or 'Se møtedetaljer'}"
        )
        if entity.meeting_link:
            body += f"\nLenke: {entity.meeting_link}"
    elif reminder_type == "INSPECTION_UPCOMING":
        subject = f"Påminnelse: {title}"
        body = (
            f"Du har en vernerunde/inspeksjon planlagt: {title}\n\n"
            f"Tidspunkt: {_fmt(entity.scheduled_date)}\n"
            f"Sted: {entity.location or 'Se detaljer'}"
        )
    elif reminder_type == "AUDIT_UPCOMING":
        subject = f"Påminnelse: Revisjon - {title}"
        body = (
            f"Du har en revisjon planlagt: {title}\n\n"
            f"Tidspunkt: {_fmt(entity.scheduled_date)}\n"
            f"Område: {entity.area}"
        )
    elif reminder_type == "MEASURE_DUE_SOON":
        subject = "Påminnelse: Tiltak forfaller snart"
        body = f"Du har et tiltak som forfaller snart: {title}\n\nFrist: {_fmt(entity.due_at)}"
    else:
        raise ValidationError(f"Unknown reminder type '{reminder_type}'")
    return subject, body


def build_sms(reminder_type: str, entity: Any) -> str:
    prefix = {
        "MEETING_UPCOMING": "Møte",
        "INSPECTION_UPCOMING": "Vernerunde",
        "AUDIT_UPCOMING": "Revisjon",
        "MEASURE_DUE_SOON": "Tiltak forfaller snart",
    }.get(reminder_type, "Påminnelse")
    when = entity.due_at if reminder_type == "MEASURE_DUE_SOON" else entity.scheduled_date
    return f"HMS Nova: {prefix} {as_utc(when).strftime('%d.%m')} - {entity.title}"


def _to_html(text: str) -> str:
    return "<p>" + html.escape(text).replace("\n", "<br>") + "</p>"


# ---------------------------------------------------------------------------
# Dispatch (batch job, all tenants)
# ---------------------------------------------------------------------------

@dataclass
class DispatchSummary:
    sent: int = 0
    failed: int = 0


async def _load_entity(session: AsyncSession, reminder: ScheduledReminder) -> Any:
    repo_cls = _ENTITY_REPOSITORIES.get(reminder.entity_type)
    if repo_cls is None:
        return None
    return await repo_cls(session, reminder.tenant_id).get_by_id(reminder.entity_id)


async def _deliver(
    reminder: ScheduledReminder,
    user: User,
    entity: Any,
    email_sender: EmailSender,
    sms_sender: SmsSender,
) -> tuple[bool, bool]:
    sent_email = sent_sms = False
    if user.notify_by_email:
        subject, body = build_email(reminder.type, entity)
        await email_sender.send(to=user.email, subject=subject, html=_to_html(body))
        sent_email = True
    if user.notify_by_sms and user.phone:
        await sms_sender.send(to=user.phone, message=build_sms(reminder.type, entity))
        sent_sms = True
    return sent_email, sent_sms


def _fail(reminder: ScheduledReminder, error: str) -> None:
    reminder.status = "FAILED"
    reminder.error = error[:1000]


async def dispatch_pending_reminders(
    session: AsyncSession,
    *,
    email_sender: EmailSender | None = None,
    sms_sender: SmsSender | None = None,
    now: datetime | None = None,
) -> DispatchSummary:
    """Send every PENDING reminder due by the end of today.

    Each reminder ends SENT or FAILED; a failure is recorded on that reminder
    and never stops the rest of the batch. The outcome is committed per
    reminder so a later crash cannot roll a delivered reminder back to PENDING.
    """
    email_sender = email_sender or get_email_sender()
    sms_sender = sms_sender or get_sms_sender()
    now = as_utc(now or utcnow())

    reminders = await list_due_reminders(session, end_of_day(now))
    logger.info("Dispatching %d due reminder(s)", len(reminders))

    summary = DispatchSummary()
    for reminder in reminders:
        try:
            user = reminder.user
            entity = await _load_entity(session, reminder) if user else None
            if user is None:
                _fail(reminder, "User not found")
            elif entity is None:
                _fail(reminder, "Entity not found")
            else:
                sent_email, sent_sms = await _deliver(
                    reminder, user, entity, email_sender, sms_sender
                )
                if sent_email or sent_sms:
                    reminder.status = "SENT"
                    reminder.sent_at = utcnow()
                    reminder.sent_via_email = sent_email
                    reminder.sent_via_sms = sent_sms
                    reminder.error = None
                else:
                    _fail(reminder, "No delivery channel available")
        except Exception as exc:
            logger.warning("Reminder %s failed: %s", reminder.id, exc)
            _fail(reminder, str(exc) or exc.__class__.__name__)

        if reminder.status == "SENT":
            summary.sent += 1
        else:
            summary.failed += 1
        await session.commit()

    logger.info("Reminder dispatch done: sent=%d failed=%d", summary.sent, summary.failed)
    return summary
