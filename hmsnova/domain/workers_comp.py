"""SQLAlchemy ORM models for workers' compensation claims and EMR history."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, Float, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hmsnova.db.base import Base
from hmsnova.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class WorkersCompClaim(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "workers_comp_claims"

    incident_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    claim_number: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    carrier_name: Mapped[str] = mapped_column(String(255), nullable=False)
    claimant_name: Mapped[str] = mapped_column(String(255), nullable=False)
    injury_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    reported_date: Mapped[date] = mapped_column(Date, nullable=False)
    # "OPEN" | "CLOSED" | "DENIED" | "LITIGATED"
    status: Mapped[str] = mapped_column(String(20), default="OPEN", nullable=False, index=True)
    reserve_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    paid_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    lost_work_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    return_to_work_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    adjuster_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    adjuster_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    closed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class EmrHistory(Base, IdMixin, TenantMixin, TimestampMixin):
    """Experience modification rate reported by the carrier for one year."""

    __tablename__ = "emr_history"
    __table_args__ = (UniqueConstraint("tenant_id", "year"),)

    year: Mapped[int] = mapped_column(Integer, nullable=False)
    emr_value: Mapped[float] = mapped_column(Float, nullable=False)
    carrier: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
