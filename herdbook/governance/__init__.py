"""Governance: immutable audit trail for record mutations. No FastAPI."""

from herdbook.governance.audit_models import AuditEntry
from herdbook.governance.audit_recorder import AuditRecorder
from herdbook.governance.audit_repository import AuditRepository
from herdbook.governance.exceptions import AuditError, GovernanceError

__all__ = [
    "AuditEntry",
    "AuditError",
    "AuditRecorder",
    "AuditRepository",
    "GovernanceError",
]
