"""Audit repository protocol. Governance layer depends on this; infrastructure implements it."""

from typing import Protocol

from herdbook.governance.audit_models import AuditEntry


class AuditRepository(Protocol):
    """Protocol for the append-only audit sink."""

    async def append(self, entry: AuditEntry) -> int:
        """Persist an immutable audit entry and return its id. Must not allow mutation."""
        ...
