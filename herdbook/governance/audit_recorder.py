"""Immutable audit trail for record mutations. No FastAPI."""

import logging
from typing import Any, Mapping, Optional

from pydantic_core import to_jsonable_python

from herdbook.core.clock import Clock
from herdbook.domain.models.records import AuditAction, RecordKind
from herdbook.governance.audit_models import AuditEntry
from herdbook.governance.audit_repository import AuditRepository
from herdbook.governance.exceptions import AuditError
from herdbook.security.actor_context import RequestContext

logger = logging.getLogger(__name__)


def serialize_snapshot(snapshot: Optional[Mapping[str, Any]]) -> Optional[dict]:
    """Field-name -> JSON-safe value. Dates become ISO strings, decimals strings, enums their values."""
    if snapshot is None:
        return None
    return to_jsonable_python(dict(snapshot))


class AuditRecorder:
    """
    Appends one audit entry per successful mutation.
    Must be called inside the same unit of work as the mutation it documents;
    the caller commits or rolls back both together.
    """

    def __init__(self, clock: Clock) -> None:
        self._clock = clock

    async def record(
        self,
        repository: AuditRepository,
        ctx: RequestContext,
        *,
        action: AuditAction,
        record_kind: RecordKind,
        record_id: int,
        before: Optional[Mapping[str, Any]],
        after: Optional[Mapping[str, Any]],
    ) -> int:
        """Write the entry and return its id. Raises AuditError on any write failure."""
        try:
            entry = AuditEntry(
                actor_id=ctx.actor_id,
                action=action,
                record_kind=record_kind,
                record_id=record_id,
                before=serialize_snapshot(before),
                after=serialize_snapshot(after),
                timestamp_utc=self._clock.now(),
                ip_address=ctx.origin.ip_address,
                user_agent=ctx.origin.user_agent,
                correlation_id=ctx.correlation_id,
            )
            entry_id = await repository.append(entry)
        except Exception as e:
            logger.error(
                "audit_write_failed",
                extra={
                    "record_kind": record_kind.value,
                    "record_id": record_id,
                    "action": action.value,
                    "error": str(e),
                },
            )
            raise AuditError(f"Audit write failed for {record_kind.value} {record_id}: {e}") from e
        logger.info(
            "audit_recorded",
            extra={
                "audit_entry_id": entry_id,
                "record_kind": record_kind.value,
                "record_id": record_id,
                "action": action.value,
            },
        )
        return entry_id
