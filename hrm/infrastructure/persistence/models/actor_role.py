"""Actor role ORM model. Assigns a role code (hr_admin, hr_manager, employee) to an actor."""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hrm.infrastructure.persistence.database import Base
from hrm.infrastructure.persistence.models.mixins import MultiTenantModel


class ActorRole(MultiTenantModel, Base):
    """Role assignment of an actor in a tenant. Table: actor_role."""

    __tablename__ = "actor_role"

    actor_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    role_code: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "actor_id", "role_code", name="uq_actor_role"),
    )
