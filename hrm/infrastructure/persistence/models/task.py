"""Lifecycle task ORM model. Checklist item owned by a lifecycle case."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from hrm.infrastructure.persistence.database import Base
from hrm.infrastructure.persistence.models.mixins import CuidMixin

if TYPE_CHECKING:
    from hrm.infrastructure.persistence.models.case import LifecycleCase


class LifecycleTask(CuidMixin, Base):
    """Task of a case; deleted with its case (ON DELETE CASCADE). Table: lifecycle_task."""

    __tablename__ = "lifecycle_task"

    case_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("lifecycle_case.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    completed_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="pending", server_default="pending"
    )
    assignee_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    case: Mapped[LifecycleCase] = relationship(back_populates="tasks")

    __mapper_args__ = {"eager_defaults": True}
