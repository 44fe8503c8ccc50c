"""SQLAlchemy ORM models for ISO 14001 environmental aspects and measurements."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hmsnova.db.base import Base
from hmsnova.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class EnvironmentalAspect(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "environmental_aspects"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    process: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    # "EMISSIONS" | "WASTE" | "ENERGY" | "WATER" | "RESOURCE_USE" | "BIODIVERSITY" | "OTHER"
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    # "NEGATIVE" | "POSITIVE"
    impact_type: Mapped[str] = mapped_column(String(20), default="NEGATIVE", nullable=False)
    severity: Mapped[int] = mapped_column(Integer, nullable=False)
    likelihood: Mapped[int] = mapped_column(Integer, nullable=False)
    significance_score: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    legal_requirement: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    control_measures: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    monitoring_method: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # "DAILY" | "WEEKLY" | "MONTHLY" | "QUARTERLY" | "ANNUALLY"
    monitoring_frequency: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    owner_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    goal_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    # "ACTIVE" | "MONITORED" | "CLOSED"
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE", nullable=False)
    next_review_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    measurements: Mapped[List["EnvironmentalMeasurement"]] = relationship(
        back_populates="aspect", lazy="noload", cascade="all, delete-orphan"
    )


class EnvironmentalMeasurement(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "environmental_measurements"

    aspect_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("environmental_aspects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    parameter: Mapped[str] = mapped_column(String(255), nullable=False)
    unit: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    method: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    measured_value: Mapped[float] = mapped_column(Float, nullable=False)
    limit_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    target_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    measurement_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # "COMPLIANT" | "WARNING" | "NON_COMPLIANT"
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    responsible_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    aspect: Mapped["EnvironmentalAspect"] = relationship(back_populates="measurements")
