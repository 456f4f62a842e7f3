"""Checklist template ORM model. Tenant-managed default task list for a case kind."""

from typing import Any

from sqlalchemy import Boolean, Index, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from hrm.infrastructure.persistence.database import Base
from hrm.infrastructure.persistence.models.mixins import MultiTenantModel


class ChecklistTemplate(MultiTenantModel, Base):
    """Stored checklist: name, kind and ordered items (JSONB list). Table: checklist_template."""

    __tablename__ = "checklist_template"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    items: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB, nullable=False, default=list, server_default=text("'[]'::jsonb")
    )
    active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )

    __table_args__ = (Index("ix_checklist_template_tenant_kind", "tenant_id", "kind"),)
    __mapper_args__ = {"eager_defaults": True}
