"""DTO for the subject (employee) a case is about."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SubjectRecord:
    """Resolved subject; department and designation drive default templates.

    is_active is False for a new hire who has not been onboarded yet.
    """

    id: str
    tenant_id: str
    name: str
    email: str | None = None
    department: str | None = None
    designation: str | None = None
    is_active: bool = True
