"""Immutable audit entry model. Domain-level immutability."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from herdbook.domain.models.records import AuditAction, RecordKind


@dataclass(frozen=True)
class AuditEntry:
    """
    Immutable audit entry: who, what, on which record, before/after, when (UTC), from where.
    Absent ``before`` means creation; absent ``after`` means deletion.
    """

    actor_id: Optional[int]
    action: AuditAction
    record_kind: RecordKind
    record_id: int
    before: Optional[Dict[str, Any]]
    after: Optional[Dict[str, Any]]
    timestamp_utc: datetime
    ip_address: str
    user_agent: str
    correlation_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for JSON logging."""
        return {
            "actor_id": self.actor_id,
            "action": self.action.value,
            "record_kind": self.record_kind.value,
            "record_id": self.record_id,
            "before": self.before,
            "after": self.after,
            "timestamp_utc": self.timestamp_utc.isoformat(),
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "correlation_id": self.correlation_id,
        }
