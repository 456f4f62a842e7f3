"""Lifecycle case ORM model. Onboarding and offboarding share one table, discriminated by kind."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrm.infrastructure.persistence.database import Base
from hrm.infrastructure.persistence.models.mixins import MultiTenantModel, VersionedMixin

if TYPE_CHECKING:
    from hrm.infrastructure.persistence.models.task import LifecycleTask


class LifecycleCase(MultiTenantModel, VersionedMixin, Base):
    """Onboarding/offboarding case for one subject. Table: lifecycle_case."""

    __tablename__ = "lifecycle_case"

    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    subject_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="pending", server_default="pending"
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    expected_completion_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    actual_completion_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_working_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    exit_interview_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    tasks: Mapped[list[LifecycleTask]] = relationship(
        back_populates="case",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="LifecycleTask.position",
    )

    __table_args__ = (
        Index("ix_lifecycle_case_tenant_kind_status", "tenant_id", "kind", "status"),
        Index("ix_lifecycle_case_tenant_subject_kind", "tenant_id", "subject_id", "kind"),
    )
    __mapper_args__ = {"eager_defaults": True}
