"""SQLAlchemy ORM models for scheduled HMS activities that carry reminders.

Meetings, inspections (vernerunder), audits and measures (tiltak) share the
same reminder fan-out; each exposes the date reminders are counted back from
via ``reminder_date``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hmsnova.db.base import Base
from hmsnova.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class Meeting(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "meetings"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    # "AMU" | "BHT" | "VERNEOMBUD" | "MANAGEMENT_REVIEW" | "OTHER"
    meeting_type: Mapped[str] = mapped_column(String(30), default="OTHER", nullable=False)
    scheduled_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    meeting_link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    agenda: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # "PLANNED" | "IN_PROGRESS" | "COMPLETED" | "CANCELLED"
    status: Mapped[str] = mapped_column(String(20), default="PLANNED", nullable=False)

    @property
    def reminder_date(self) -> datetime:
        return self.scheduled_date


class Inspection(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "inspections"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    # "VERNERUNDE" | "HMS_INSPEKSJON" | "BRANNØVELSE" | "OTHER"
    inspection_type: Mapped[str] = mapped_column(String(30), default="VERNERUNDE", nullable=False)
    scheduled_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # "PLANNED" | "IN_PROGRESS" | "COMPLETED" | "CANCELLED"
    status: Mapped[str] = mapped_column(String(20), default="PLANNED", nullable=False)

    @property
    def reminder_date(self) -> datetime:
        return self.scheduled_date


class Audit(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "audits"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    # "INTERNAL" | "EXTERNAL" | "SUPPLIER" | "CERTIFICATION"
    audit_type: Mapped[str] = mapped_column(String(20), default="INTERNAL", nullable=False)
    scheduled_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    area: Mapped[str] = mapped_column(String(255), nullable=False)
    scope: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # "PLANNED" | "IN_PROGRESS" | "COMPLETED" | "CANCELLED"
    status: Mapped[str] = mapped_column(String(20), default="PLANNED", nullable=False)

    @property
    def reminder_date(self) -> datetime:
        return self.scheduled_date


class Measure(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "measures"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    due_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    responsible_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    incident_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    # "PENDING" | "IN_PROGRESS" | "DONE"
    status: Mapped[str] = mapped_column(String(20), default="PENDING", nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def reminder_date(self) -> datetime:
        return self.due_at
