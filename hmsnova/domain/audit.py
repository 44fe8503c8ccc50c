"""SQLAlchemy ORM model for the system audit log."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, JSON, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from hmsnova.db.base import Base
from hmsnova.domain.mixins import IdMixin, utcnow


class AuditLog(Base, IdMixin):
    """Immutable record of a write request.

    ``tenant_id`` is a plain column rather than a foreign key: requests
    carrying an unknown tenant header are still logged.
    """

    __tablename__ = "audit_log"

    tenant_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    # Who
    user_id: Mapped[Optional[str]] = mapped_column(String(36), index=True, nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    # What
    action: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    resource: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    metadata_json: Mapped[Optional[Any]] = mapped_column("metadata", JSON, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # When (no updated_at — audit rows are immutable)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )
