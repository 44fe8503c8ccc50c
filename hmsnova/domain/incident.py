"""SQLAlchemy ORM models for incidents and the yearly OSHA 300 log."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hmsnova.db.base import Base
from hmsnova.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class Incident(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "incidents"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # "AVVIK" | "NESTEN" | "SKADE" | "MILJO" | "KVALITET"
    incident_type: Mapped[str] = mapped_column(String(20), default="AVVIK", nullable=False)
    severity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    employee_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    reported_by: Mapped[str] = mapped_column(String(255), nullable=False)
    witness_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    immediate_action: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # "OPEN" | "INVESTIGATING" | "ACTION_TAKEN" | "CLOSED"
    status: Mapped[str] = mapped_column(String(20), default="OPEN", nullable=False, index=True)

    # Root cause analysis and closure (ISO 9001 10.2)
    root_cause: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    contributing_factors: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    investigated_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    investigated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    closed_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    closed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    effectiveness_review: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    lessons_learned: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # OSHA recordkeeping (29 CFR 1904)
    osha_recordable: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    # "FATALITY" | "DAYS_AWAY" | "RESTRICTED_WORK" | "JOB_TRANSFER" | "OTHER_RECORDABLE"
    osha_classification: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    # "INJURY" | "ILLNESS"
    event_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    # "SKIN_DISORDER" | "RESPIRATORY_CONDITION" | "POISONING" | "HEARING_LOSS" | "ALL_OTHER_ILLNESSES"
    illness_type: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    days_away_from_work: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    days_on_restriction: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    days_on_transfer: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    body_part_affected: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    nature_of_injury: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    privacy_case_flag: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    osha_300_log_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    osha_301_completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class OshaLog(Base, IdMixin, TenantMixin, TimestampMixin):
    """OSHA 300A summary for one establishment-year."""

    __tablename__ = "osha_logs"
    __table_args__ = (UniqueConstraint("tenant_id", "year"),)

    year: Mapped[int] = mapped_column(Integer, nullable=False)
    total_hours_worked: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    avg_employee_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Columns G-J of the 300A
    total_deaths: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_days_away: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_restricted: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_transfer: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_other_recordable: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Column M (injury and illness types)
    total_injuries: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_skin_disorders: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_respiratory_conditions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_poisonings: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_hearing_loss: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_other_illnesses: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Rates per 200,000 hours; null when no hours were reported
    trir: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    dart_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    ltir: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    severity_rate: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    certified_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    certified_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    certified_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    posted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    posted_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
