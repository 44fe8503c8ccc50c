"""SQLAlchemy ORM model for the chemical inventory (stoffkartotek)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, Float, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hmsnova.db.base import Base
from hmsnova.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class Chemical(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "chemicals"

    product_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    supplier: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    cas_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True, index=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    quantity: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    unit: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    # "ACTIVE" | "ARCHIVED"
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE", nullable=False, index=True)

    # Safety data sheet
    sds_file_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    sds_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    sds_source: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    hazard_statements: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    signal_word: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    warning_pictograms: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    required_ppe: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    contains_isocyanates: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    isocyanate_details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
