"""SQLAlchemy ORM model for delayed-send reminders."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hmsnova.db.base import Base
from hmsnova.domain.mixins import IdMixin, TenantMixin, TimestampMixin
from hmsnova.domain.tenant import User


class ScheduledReminder(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "scheduled_reminders"
    __table_args__ = (
        Index("ix_scheduled_reminders_entity", "entity_type", "entity_id"),
        Index("ix_scheduled_reminders_due", "status", "scheduled_for"),
    )

    user_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    # "MEETING_UPCOMING" | "INSPECTION_UPCOMING" | "AUDIT_UPCOMING" | "MEASURE_DUE_SOON"
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    # "Meeting" | "Inspection" | "Audit" | "Measure"
    entity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(36), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    scheduled_for: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # "PENDING" | "SENT" | "FAILED" | "CANCELLED"
    status: Mapped[str] = mapped_column(String(20), default="PENDING", nullable=False)
    sent_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    sent_via_email: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    sent_via_sms: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    user: Mapped[Optional["User"]] = relationship(lazy="noload")
