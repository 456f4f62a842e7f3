"""DTOs for lifecycle notifications and audit entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from hrm.domain.enums import CaseKind, LifecycleEventType
from hrm.shared.enums import ActorType, AuditAction


@dataclass(frozen=True)
class LifecycleEvent:
    """Domain event sent to the notification sink (at-most-once)."""

    tenant_id: str
    case_id: str
    kind: CaseKind
    event: LifecycleEventType
    timestamp: datetime
    subject_id: str | None = None
    task_id: str | None = None
    actor_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return the wire payload {caseId, kind, event, timestamp, ...}."""
        payload: dict[str, Any] = {
            "case_id": self.case_id,
            "kind": self.kind.value,
            "event": self.event.value,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.subject_id:
            payload["subject_id"] = self.subject_id
        if self.task_id:
            payload["task_id"] = self.task_id
        return payload


@dataclass(frozen=True)
class AuditEntry:
    """Before/after diff of one mutating operation, keyed by actor, time and resource."""

    tenant_id: str
    actor_id: str | None
    action: AuditAction
    resource_type: str
    resource_id: str
    timestamp: datetime
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    actor_type: ActorType = ActorType.USER
    metadata: dict[str, Any] = field(default_factory=dict)
