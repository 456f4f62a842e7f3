"""Employee ORM model. The subject a lifecycle case is about (read-only here)."""

from sqlalchemy import Boolean, String, text
from sqlalchemy.orm import Mapped, mapped_column

from hrm.infrastructure.persistence.database import Base
from hrm.infrastructure.persistence.models.mixins import MultiTenantModel, SoftDeleteMixin


class Employee(MultiTenantModel, SoftDeleteMixin, Base):
    """Employee record; department and designation select default tasks. Table: employee."""

    __tablename__ = "employee"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    department: Mapped[str | None] = mapped_column(String(255), nullable=True)
    designation: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
