"""SQLAlchemy ORM models for tenants, users and tenant membership."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hmsnova.db.base import Base
from hmsnova.domain.mixins import IdMixin, TimestampMixin


class Tenant(Base, IdMixin, TimestampMixin):
    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    org_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    # "ACTIVE" | "SUSPENDED" | "CANCELLED"
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE", nullable=False)

    members: Mapped[List["UserTenant"]] = relationship(
        back_populates="tenant", lazy="noload", cascade="all, delete-orphan"
    )


class User(Base, IdMixin, TimestampMixin):
    """A person who can belong to one or more tenants.

    Notification preferences live on the user and are shared by every
    tenant the user belongs to.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    notify_by_email: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notify_by_sms: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    reminder_days_before: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    notify_meetings: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notify_inspections: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notify_audits: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notify_measures: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    tenants: Mapped[List["UserTenant"]] = relationship(
        back_populates="user", lazy="noload", cascade="all, delete-orphan"
    )


class UserTenant(Base, IdMixin, TimestampMixin):
    __tablename__ = "user_tenants"
    __table_args__ = (UniqueConstraint("user_id", "tenant_id"),)

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tenant_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # "ADMIN" | "HMS" | "LEDER" | "VERNEOMBUD" | "ANSATT"
    role: Mapped[str] = mapped_column(String(20), default="ANSATT", nullable=False)

    user: Mapped["User"] = relationship(back_populates="tenants")
    tenant: Mapped["Tenant"] = relationship(back_populates="members")
